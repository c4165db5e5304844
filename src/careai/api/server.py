"""FastAPI application exposing the conversation engine."""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from careai.api.auth.base import AuthProvider
from careai.config import Settings
from careai.conversation_database.controller import (
    CareAIController,
    ConversationInput,
    MessageInput,
    TurnReply,
)
from careai.conversation_database.data_models.conversation import Conversation, ConversationThread
from careai.exceptions import (
    ConversationClosedError,
    ConversationNotFoundError,
    InvalidInputError,
    StorageError,
)


class StartConversationResponse(BaseModel):
    conversation_id: str
    message: str = "Conversation started successfully"


class DeleteConversationResponse(BaseModel):
    deleted: bool


def create_app(controller: CareAIController, auth_provider: AuthProvider, settings: Settings) -> FastAPI:
    app = FastAPI(title="CareAI API", version="0.1.0")
    app.state.controller = controller

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})

    @app.exception_handler(ConversationNotFoundError)
    async def not_found_handler(request: Request, exc: ConversationNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})

    @app.exception_handler(ConversationClosedError)
    async def closed_handler(request: Request, exc: ConversationClosedError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.exception(f"Storage failure on {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "An error occurred while processing your request"},
        )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/api/conversation/start", response_model=StartConversationResponse)
    async def start_conversation(request: ConversationInput):
        conversation = await app.state.controller.start_conversation(request)
        return StartConversationResponse(conversation_id=conversation.id)

    @app.post("/api/conversation/{conversation_id}/message", response_model=TurnReply)
    async def send_message(conversation_id: str, request: MessageInput):
        return await app.state.controller.process_new_message(conversation_id, request)

    @app.get("/api/conversation", response_model=list[Conversation])
    async def list_conversations(user_id: str):
        return await app.state.controller.get_conversations_by_user_id(user_id)

    @app.get("/api/conversation/{conversation_id}", response_model=ConversationThread)
    async def get_conversation(conversation_id: str):
        return await app.state.controller.get_conversation_by_id(conversation_id)

    @app.delete("/api/conversation/{conversation_id}", response_model=DeleteConversationResponse)
    async def delete_conversation(conversation_id: str):
        return DeleteConversationResponse(deleted=await app.state.controller.delete_conversation(conversation_id))

    auth_provider.bind_to_app(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app
