"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import asyncio
from typing import Awaitable

import click

from storefront.application.dto import UseCaseResult


def execute(call: Awaitable[UseCaseResult]) -> UseCaseResult:
    """Run a handler to completion; a failed result becomes a ClickException."""
    result = asyncio.run(call)  # type: ignore[arg-type]
    if not result.success:
        raise click.ClickException(describe_failure(result))
    return result


def describe_failure(result: UseCaseResult) -> str:
    message = result.message
    details = [e for e in result.errors if e != result.message]
    if details:
        message = f"{message}: {'; '.join(details)}"
    if result.critical:
        message = f"CRITICAL: {message}"
    return message
