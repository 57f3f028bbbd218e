import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from agent_context.core.discover.context_helper import ContextHelper
from agent_context.models.api import FileContentResponse, InstallRequest, InstallResponse
from agent_context.models.context import PackageInfo

router = APIRouter()
logger = logging.getLogger(__name__)

def get_helper(request: Request) -> ContextHelper:
    return request.app.state.helper

@router.get("/packages", response_model=List[PackageInfo], summary="List installed packages that ship context")
def list_packages(helper: ContextHelper = Depends(get_helper)):
    return helper.find_packages_with_context()

@router.get("/packages/{name}/files", response_model=List[str], summary="List a package's context files")
def list_files(name: str, helper: ContextHelper = Depends(get_helper)):
    files = helper.list_context_files(name)
    if files is None:
        raise HTTPException(status_code=404, detail=f"No context found for package {name}.")
    return files

@router.get("/packages/{name}/files/{file_name:path}", response_model=FileContentResponse,
            summary="Show one context file, with or without its extension")
def show_file(name: str, file_name: str, helper: ContextHelper = Depends(get_helper)):
    content = helper.show_context_file(name, file_name)
    if content is None:
        raise HTTPException(status_code=404, detail=f"Context file {file_name} not found in {name}.")
    return FileContentResponse(package=name, file_name=file_name, content=content)

@router.post("/install", response_model=InstallResponse, summary="Install context from packages into the local store")
def install(request_data: InstallRequest, helper: ContextHelper = Depends(get_helper)):
    """
    Installs the named packages, or every package with context when none are named.
    Packages without context are reported as missing, the rest still install.
    """
    try:
        if request_data.packages is None:
            return InstallResponse(installed=helper.install_all_context())

        installed, missing = [], []
        for name in request_data.packages:
            (installed if helper.install_package_context(name) else missing).append(name)
        return InstallResponse(installed=installed, missing=missing)

    except OSError as e:
        logger.exception("Context installation failed.")
        raise HTTPException(status_code=500, detail=f"Installation failed: {e}")
