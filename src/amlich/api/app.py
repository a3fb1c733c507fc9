from fastapi import FastAPI
from amlich.api.public import router as public_router

app = FastAPI(title="amlich public api")
app.include_router(public_router)
