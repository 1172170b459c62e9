"""HTTP API for the MicroSkill backend."""
