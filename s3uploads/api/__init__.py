"""HTTP surface: FastAPI dependencies and routers."""
