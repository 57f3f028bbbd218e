import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from agent_context.config.settings import settings
from agent_context.core.discover.context_helper import ContextHelper
from agent_context.core.pipeline.context_pipeline import ContextPipeline
from agent_context.models.document import SectionSpec
from agent_context.storage.context_store import LocalContextStore
from agent_context.storage.document_store import LocalDocumentStore
from agent_context.storage.package_source import InstalledPackageSource
from agent_context.version import VERSION

# Configure logging
logging.basicConfig(level=settings.logging.level, format=settings.logging.format)
logger = logging.getLogger(__name__)

def build_section_spec() -> SectionSpec:
    target = settings.target
    return SectionSpec(
        anchor_heading_text=target.anchor_heading,
        anchor_level=target.anchor_level,
        section_heading_text=target.section_heading,
        section_level=target.section_level
    )

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup: wire stores and pipeline once ---
    logger.info("Initializing agent-context stores and pipeline...")

    context_store = LocalContextStore(
        context_path=settings.context.context_path,
        metadata_filename=settings.context.metadata_filename
    )
    document_store = LocalDocumentStore()

    helper = ContextHelper(
        source=InstalledPackageSource(),
        store=context_store,
        source_directory=settings.context.source_directory
    )
    pipeline = ContextPipeline(
        context_store=context_store,
        document_store=document_store,
        spec=build_section_spec(),
        provenance=settings.target.provenance
    )

    # Store in app.state for dependency injection
    app.state.context_store = context_store
    app.state.document_store = document_store
    app.state.helper = helper
    app.state.pipeline = pipeline
    app.state.target_path = settings.target.path

    logger.info("Initialization complete.")

    yield

    logger.info("Shutting down agent-context API...")

app = FastAPI(
    title="agent-context API",
    description="Discover package documentation fragments and merge their index into AGENT.md",
    version=VERSION,
    lifespan=lifespan
)

@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok"}

from agent_context.api.routes import packages, index

app.include_router(packages.router, prefix="/api", tags=["Packages"])
app.include_router(index.router, prefix="/api", tags=["Index"])
