# =========================================================
# IMPORTS
# =========================================================
import os
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routes.simulacion import router as simulacion_router

# =========================================================
# LOGGING
# =========================================================
def nivel_log(nombre):
    """Nivel numérico para LOG_LEVEL; INFO si el nombre no existe."""
    nivel = logging.getLevelName((nombre or "INFO").strip().upper())
    return nivel if isinstance(nivel, int) else logging.INFO


logging.basicConfig(
    level=nivel_log(os.getenv("LOG_LEVEL")),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# =========================================================
# FASTAPI APP
# =========================================================
app = FastAPI(title="Calculadora Modalidad 40")

# =========================================================
# CORS
# =========================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =========================================================
# ROUTES SIMULACION
# =========================================================
app.include_router(simulacion_router, prefix="/api/simulacion")

# =========================================================
# PING
# =========================================================
@app.get("/ping")
def ping():
    return {"status": "alive"}


logger.info("Backend Calculadora Modalidad 40 cargado")
