import logging
import os
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from agent_context.models.context import FragmentSummary, MetadataStatus, PackageMetadataOverride
from agent_context.core.index.metadata_loader import load_package_metadata
from agent_context.core.summarize.fragment_summarizer import DEFAULT_TITLE, FragmentSummarizer
from agent_context.version import VERSION

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No context files found. Run `agent-context install` to install context from packages."

class ContentAggregator:
    """
    Renders the generated Context section body from installed fragments.

    groups maps package name -> fragment paths. Packages keep the caller's order
    (discovery order); fragment order inside a package is the caller's sorted order.
    With provenance on, the block opens with a "Generated on ..." line, so it changes
    on every run.
    """

    def __init__(self,
                 context_path: str,
                 metadata_filename: str = "index.yaml",
                 summarizer: Optional[FragmentSummarizer] = None,
                 provenance: bool = False):
        self.context_path = context_path
        self.metadata_filename = metadata_filename
        self.summarizer = summarizer or FragmentSummarizer()
        self.provenance = provenance

    def aggregate(self, groups: Dict[str, List[str]], generated_at: Optional[datetime] = None) -> str:
        header = []
        if self.provenance:
            stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
            header = [f"Generated on {stamp} by agent-context {VERSION}.", ""]

        if not any(groups.values()):
            return "\n".join(header + [EMPTY_MESSAGE])

        sections = header
        for package_name, (description, summaries) in self.summarize_groups(groups).items():
            if sections and sections[-1]:
                sections.append("")
            sections.append(f"### {package_name}")
            sections.append("")
            if description:
                sections.append(description)
                sections.append("")
            for summary in summaries:
                sections.append(f"- **[{summary.title}]({summary.source_path})**")
                if summary.description:
                    sections.append(f"  {summary.description}")

        # Drop the blank line left behind by a package whose fragments were all skipped
        while sections and not sections[-1]:
            sections.pop()
        return "\n".join(sections)

    def summarize_groups(self, groups: Dict[str, List[str]]) -> Dict[str, Tuple[str, List[FragmentSummary]]]:
        """
        Returns package name -> (package description, fragment summaries), skipping unreadable fragments.
        """
        result = {}
        for package_name, file_paths in groups.items():
            if not file_paths:
                continue
            metadata = self._load_metadata(package_name)
            description = _single_line(metadata.description) or f"Context files for {package_name}"

            summaries = []
            for file_path in file_paths:
                summary = self._summarize_file(package_name, file_path, metadata)
                if summary is not None:
                    summaries.append(summary)
            result[package_name] = (description, summaries)
        return result

    def _load_metadata(self, package_name: str) -> PackageMetadataOverride:
        path = os.path.join(self.context_path, package_name, self.metadata_filename)
        loaded = load_package_metadata(path)
        if loaded.status == MetadataStatus.invalid:
            logger.warning(f"Ignoring malformed metadata for {package_name} ({path}): {loaded.error}")
        return loaded.metadata

    def _summarize_file(self,
                        package_name: str,
                        file_path: str,
                        metadata: PackageMetadataOverride) -> Optional[FragmentSummary]:
        relative_path = self._relative(file_path)
        package_relative = self._relative(file_path, os.path.join(self.context_path, package_name))

        entry = metadata.entry_for(package_relative)
        if entry is not None:
            return FragmentSummary(
                title=_single_line(entry.title) or DEFAULT_TITLE,
                description=_single_line(entry.description),
                source_path=relative_path
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                raw_text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable context file {file_path}: {e}")
            return None

        title, description = self.summarizer.summarize(raw_text)
        return FragmentSummary(title=title, description=description, source_path=relative_path)

    def _relative(self, file_path: str, base: Optional[str] = None) -> str:
        base = self.context_path if base is None else base
        return os.path.relpath(file_path, base).replace(os.sep, "/")

def _single_line(value: str) -> str:
    """Collapses sidecar text onto one line; a leading "#" is escaped so it stays paragraph text."""
    text = " ".join(value.split())
    return "\\" + text if text.startswith("#") else text
