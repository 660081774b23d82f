"""
FastAPI routes for knowledge base operations.

Provides HTTP endpoints for asking questions, importing structured JSON,
uploading Word documents, exporting and resetting the knowledge base.
"""

from typing import Optional

from fastapi import APIRouter, UploadFile, File, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from loguru import logger

from .knowledge_base import KnowledgeBaseManager
from .knowledge_base.errors import ConversionError, ParseError


class SearchRequest(BaseModel):
    """Request body for a knowledge base search."""

    query: str


class ChatRequest(BaseModel):
    """Request body for one user utterance."""

    message: str


def init_kb_routes(kb_manager: KnowledgeBaseManager) -> APIRouter:
    """
    Create and return API routes for knowledge base operations.

    Args:
        kb_manager: KnowledgeBaseManager instance

    Returns:
        APIRouter: Configured router with KB endpoints
    """
    router = APIRouter(prefix="/kb", tags=["knowledge_base"])
    max_upload_bytes = kb_manager.config.max_upload_bytes

    async def read_upload(file: UploadFile) -> bytes:
        if not file.filename:
            raise HTTPException(status_code=400, detail="Filename is required")

        content = await file.read()

        if not content:
            raise HTTPException(status_code=400, detail="File is empty")
        if len(content) > max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds the {max_upload_bytes} byte upload limit",
            )
        return content

    @router.post("/search")
    async def search(request: SearchRequest):
        """
        Find the best matching entry for a query.

        Args:
            request: Search parameters

        Returns:
            The matched entry (or null) and the reply text
        """
        entry = kb_manager.search(request.query)
        return JSONResponse(
            status_code=200,
            content={
                "success": True,
                "data": {
                    "query": request.query,
                    "match": kb_manager.format_match(entry),
                    "reply": entry.answer if entry else kb_manager.default_response(),
                },
            },
        )

    @router.post("/chat")
    async def chat(request: ChatRequest):
        """
        Answer one user message.

        Args:
            request: The user's message

        Returns:
            The assistant's reply and the id of the entry it came from
        """
        entry = kb_manager.search(request.message)
        return JSONResponse(
            status_code=200,
            content={
                "success": True,
                "data": {
                    "reply": entry.answer if entry else kb_manager.default_response(),
                    "matched_id": entry.id if entry else None,
                },
            },
        )

    @router.get("/greeting")
    async def greeting():
        """Return the assistant's opening message."""
        return JSONResponse(
            status_code=200,
            content={"success": True, "data": {"message": kb_manager.greeting()}},
        )

    @router.post("/import")
    async def import_knowledge(
        request: Request, file: Optional[UploadFile] = File(None)
    ):
        """
        Import structured JSON knowledge.

        The entries can come as an uploaded JSON file or as the raw JSON
        request body.

        Args:
            request: Incoming request, read when no file is uploaded
            file: JSON file holding an array of entries

        Returns:
            Number of entries added
        """
        if file is not None:
            source = file.filename
            content = await read_upload(file)
        else:
            source = "request body"
            content = await request.body()
            if not content:
                raise HTTPException(status_code=400, detail="Request body is empty")
            if len(content) > max_upload_bytes:
                raise HTTPException(
                    status_code=413,
                    detail=f"Body exceeds the {max_upload_bytes} byte upload limit",
                )

        try:
            added = kb_manager.import_payload(content)
        except ParseError as e:
            logger.error(f"Invalid knowledge from '{source}': {e}")
            raise HTTPException(
                status_code=400,
                detail="Invalid knowledge base format. Expected an array of entries.",
            )

        return JSONResponse(
            status_code=200,
            content={
                "success": True,
                "message": f"Added {added} entries to the knowledge base",
                "data": {"entries_added": added, "stats": kb_manager.get_stats()},
            },
        )

    @router.post("/upload")
    async def upload_document(
        file: UploadFile = File(...),
        background: bool = Query(
            True, description="Ingest in the background and return a task id"
        ),
    ):
        """
        Upload a Word document and extract knowledge entries from it.

        Args:
            file: Uploaded .docx file
            background: Whether to ingest in the background

        Returns:
            Task info, or the final ingestion status when background is false
        """
        content = await read_upload(file)

        try:
            result = await kb_manager.ingest_document(
                filename=file.filename,
                content=content,
                background=background,
            )
        except ConversionError as e:
            logger.error(f"Failed to ingest '{file.filename}': {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to ingest document: {e}")
            raise HTTPException(status_code=500, detail=f"Ingestion failed: {str(e)}")

        if background:
            message = "Ingestion started"
        elif result["status"] == "empty":
            message = "Couldn't extract any question-answer pairs from the document"
        else:
            message = f"Added {result['entries_added']} entries to the knowledge base"

        return JSONResponse(
            status_code=200,
            content={"success": True, "message": message, "data": result},
        )

    @router.post("/convert")
    async def convert_document(file: UploadFile = File(...)):
        """
        Extract entries from a Word document without importing them.

        Args:
            file: Uploaded .docx file

        Returns:
            Extracted entries in the import payload format
        """
        content = await read_upload(file)

        try:
            entries = await kb_manager.preview_document(file.filename, content)
        except ConversionError as e:
            logger.error(f"Failed to convert '{file.filename}': {e}")
            raise HTTPException(status_code=400, detail=str(e))

        return JSONResponse(
            status_code=200,
            content={
                "success": True,
                "message": f"Found {len(entries)} potential knowledge entries",
                "data": {"entries": entries, "count": len(entries)},
            },
        )

    @router.get("/tasks/{task_id}")
    async def get_task(task_id: str):
        """
        Get the status of a background ingestion.

        Args:
            task_id: Task id returned by the upload endpoint

        Returns:
            Task status
        """
        status = kb_manager.get_ingestion_status(task_id)
        if status is None:
            raise HTTPException(status_code=404, detail=f"Task '{task_id}' not found")

        return JSONResponse(status_code=200, content={"success": True, "data": status})

    @router.get("/stats")
    async def get_stats():
        """
        Get statistics about the knowledge base.

        Returns:
            Total, imported and default entry counts
        """
        return JSONResponse(
            status_code=200,
            content={"success": True, "data": kb_manager.get_stats()},
        )

    @router.get("/export")
    async def export_knowledge():
        """
        Export all entries as a downloadable JSON file.

        Returns:
            The structured import payload
        """
        return JSONResponse(
            status_code=200,
            content=kb_manager.export(),
            headers={
                "Content-Disposition": 'attachment; filename="knowledge-base.json"'
            },
        )

    @router.post("/reset")
    async def reset():
        """
        Remove imported entries and restore the built-in knowledge.

        Returns:
            Reset confirmation with fresh stats
        """
        kb_manager.reset()
        return JSONResponse(
            status_code=200,
            content={
                "success": True,
                "message": "Knowledge base reset to default entries",
                "data": kb_manager.get_stats(),
            },
        )

    return router
