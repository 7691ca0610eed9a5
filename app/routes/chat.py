"""Chat route.

POST /api/chat   {query, conversationId?} -> {response, suggestions, results?, provider?}

conversationId is accepted and logged but the engine keeps no state
between calls.
"""

from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app import logging_middleware

router = APIRouter(prefix="/api")


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Any: a non-string query gets the "didn't understand" reply, not a 422
    query: Any = None
    conversation_id: Optional[str] = Field(default=None, alias="conversationId")


@router.post("/chat")
def chat(request: Request, body: ChatRequest):
    engine = request.app.state.chat_engine
    result = engine.handle(body.query)

    if isinstance(body.query, str) and body.query.strip():
        understanding = result.understanding
        logging_middleware.log_query(
            conversation_id=body.conversation_id,
            query=body.query,
            intent=understanding.intent.value if understanding else None,
            entities=understanding.to_dict()["entities"] if understanding else {},
            response=result.reply.response,
            result_count=result.result_count,
        )

    status_code = 500 if result.error else 200
    return JSONResponse(content=result.reply.to_dict(), status_code=status_code)
