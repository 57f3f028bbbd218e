"""Builds helpers and pipelines from CLI options layered over settings."""

from __future__ import annotations

import argparse

from agent_context.config.settings import AppSettings, load_settings, settings
from agent_context.core.discover.context_helper import ContextHelper
from agent_context.core.pipeline.context_pipeline import ContextPipeline
from agent_context.models.document import SectionSpec
from agent_context.storage.context_store import LocalContextStore
from agent_context.storage.document_store import LocalDocumentStore
from agent_context.storage.package_source import InstalledPackageSource


def load_app_settings(args: argparse.Namespace) -> AppSettings:
    return load_settings(args.config) if getattr(args, "config", None) else settings


def build_context_store(args: argparse.Namespace) -> LocalContextStore:
    app_settings = load_app_settings(args)
    return LocalContextStore(
        context_path=getattr(args, "context_path", None) or app_settings.context.context_path,
        metadata_filename=app_settings.context.metadata_filename,
    )


def build_helper(args: argparse.Namespace) -> ContextHelper:
    return ContextHelper(
        source=InstalledPackageSource(),
        store=build_context_store(args),
        source_directory=load_app_settings(args).context.source_directory,
    )


def build_pipeline(args: argparse.Namespace) -> ContextPipeline:
    target = load_app_settings(args).target
    spec = SectionSpec(
        anchor_heading_text=target.anchor_heading,
        anchor_level=target.anchor_level,
        section_heading_text=target.section_heading,
        section_level=target.section_level,
    )
    return ContextPipeline(
        context_store=build_context_store(args),
        document_store=LocalDocumentStore(),
        spec=spec,
        provenance=getattr(args, "provenance", False) or target.provenance,
    )


def target_path(args: argparse.Namespace) -> str:
    return getattr(args, "output", None) or load_app_settings(args).target.path
