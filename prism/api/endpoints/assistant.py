from datetime import datetime, timezone
from typing import Annotated, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from prism.assistant import service
from prism.core import schemas
from prism.core.clean_room.templates import match_template
from prism.core.exceptions import LLMError

router = APIRouter(prefix="/assistant", tags=["Assistant"])


# Real network by default, tests swap in a mock transport
def get_llm_transport() -> Optional[httpx.AsyncBaseTransport]:
    return None


transport_dep = Annotated[Optional[httpx.AsyncBaseTransport], Depends(get_llm_transport)]


@router.post("/ask", response_model=schemas.AssistantResponse)
async def ask_assistant(request: schemas.AssistantRequest, transport: transport_dep):
    """
    Answer a free-text question about the clean room data.
    Also names the approved template that covers the question, if any.
    """
    question = request.question.strip()
    if not question:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Question is required")

    history = [message.model_dump() for message in request.history]
    try:
        answer = await service.ask(question, request.context, history, transport=transport)
    except LLMError as error:
        return JSONResponse(
            status_code=error.status_code,
            content={"error": error.message, "details": error.details},
        )

    template = match_template(question)
    return {
        "answer": answer,
        "matched_template": template.id if template else None,
        "timestamp": datetime.now(timezone.utc),
    }
