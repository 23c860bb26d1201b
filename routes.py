# routes.py
from fastapi import FastAPI
from controller.chat_controller import chat_router
from controller.dictionary_controller import dictionary_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(chat_router)
    app.include_router(dictionary_router)
