import logging
import os
import yaml
from pydantic import ValidationError
from agent_context.models.context import MetadataLoadResult, MetadataStatus, PackageMetadataOverride

logger = logging.getLogger(__name__)

def load_package_metadata(path: str) -> MetadataLoadResult:
    """
    Best-effort load of a package's metadata sidecar.

    Never raises: an absent file is MISSING, anything unreadable, non-YAML or of the
    wrong shape is INVALID with the reason attached. Both carry an empty override.
    """
    if not os.path.isfile(path):
        return MetadataLoadResult(status=MetadataStatus.missing)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        return MetadataLoadResult(status=MetadataStatus.invalid, error=f"unreadable: {e}")

    if not isinstance(data, dict):
        return MetadataLoadResult(
            status=MetadataStatus.invalid,
            error=f"expected a mapping, got {type(data).__name__}"
        )

    try:
        metadata = PackageMetadataOverride.model_validate(data)
    except ValidationError as e:
        return MetadataLoadResult(status=MetadataStatus.invalid, error=str(e))

    return MetadataLoadResult(status=MetadataStatus.loaded, metadata=metadata)
