import logging
from typing import Callable, Optional
from agent_context.core.index.aggregator import ContentAggregator
from agent_context.core.merge.section_merger import SectionMerger
from agent_context.models.document import MergeResult, SectionSpec
from agent_context.storage.base import ContextStore, DocumentStore

logger = logging.getLogger(__name__)

class ContextPipeline:
    """
    Orchestrates one index run:
    collect installed fragments -> aggregate -> read target -> merge -> write

    The merge is computed completely before the single write, so a parse or merge
    failure leaves the target document exactly as it was. No locking is done: the
    target is assumed to have a single writer for the duration of the run.
    """

    def __init__(self,
                 context_store: ContextStore,
                 document_store: DocumentStore,
                 spec: Optional[SectionSpec] = None,
                 provenance: bool = False):
        self.context_store = context_store
        self.document_store = document_store
        self.spec = spec or SectionSpec()

        self.aggregator = ContentAggregator(
            context_path=context_store.context_path,
            metadata_filename=context_store.metadata_filename,
            provenance=provenance
        )
        self.merger = SectionMerger(self.spec)

    def generate(self) -> str:
        """Builds the generated block from whatever is currently installed."""
        groups = self.context_store.collect_groups()
        logger.info(f"Collected {sum(len(files) for files in groups.values())} fragment(s) from {len(groups)} package(s)")
        return self.aggregator.aggregate(groups)

    def run(self,
            target_path: str,
            dry_run: bool = False,
            progress_callback: Optional[Callable[[str], None]] = None) -> MergeResult:
        def update_progress(message: str):
            if progress_callback:
                progress_callback(message)
            logger.info(f"[{target_path}] {message}")

        update_progress("Aggregating installed context")
        block = self.generate()

        update_progress("Reading target document")
        existing = self.document_store.read(target_path)

        update_progress("Merging generated section")
        result = self.merger.merge(existing, block)
        result.path = target_path

        if dry_run:
            update_progress(f"Dry run, not writing ({result.outcome.value})")
        elif not result.changed:
            update_progress("Document already up to date")
        else:
            self.document_store.write(target_path, result.text)
            update_progress(f"Document updated ({result.outcome.value})")

        return result
