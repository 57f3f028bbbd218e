import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from agent_context.core.pipeline.context_pipeline import ContextPipeline
from agent_context.errors import DocumentParseError, DocumentWriteError, GeneratedBlockError
from agent_context.models.api import IndexResponse, MergeRequest, MergeResponse

router = APIRouter()
logger = logging.getLogger(__name__)

def get_pipeline(request: Request) -> ContextPipeline:
    return request.app.state.pipeline

@router.get("/index", response_model=IndexResponse, summary="Preview the generated Context section body")
def preview_index(pipeline: ContextPipeline = Depends(get_pipeline)):
    groups = pipeline.context_store.collect_groups()
    return IndexResponse(
        content=pipeline.aggregator.aggregate(groups),
        package_count=len(groups),
        file_count=sum(len(files) for files in groups.values())
    )

@router.post("/merge", response_model=MergeResponse, summary="Merge the generated section into the target document")
def merge_index(request_data: MergeRequest, request: Request, pipeline: ContextPipeline = Depends(get_pipeline)):
    """
    Runs one index pass against the configured target document.
    A parse or merge failure returns 422 and leaves the document untouched.
    """
    target_path = request.app.state.target_path
    try:
        result = pipeline.run(target_path, dry_run=request_data.dry_run)
    except (DocumentParseError, GeneratedBlockError) as e:
        logger.warning(f"Merge into {target_path} rejected: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except (DocumentWriteError, OSError) as e:
        logger.exception(f"Merge into {target_path} failed.")
        raise HTTPException(status_code=500, detail=str(e))

    return MergeResponse(
        path=target_path,
        outcome=result.outcome,
        changed=result.changed,
        written=result.changed and not request_data.dry_run,
        text=result.text
    )
