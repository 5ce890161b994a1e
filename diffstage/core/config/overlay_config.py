"""Overlay engine configuration for diffstage.

This module provides the settings that control how overlays resolve paths,
decode file content and report batch results.
"""

import argparse
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class OverlayConfig(BaseModel):
    """Overlay engine configuration.

    Configuration can be provided via:
    - Environment variables (DIFFSTAGE_*)
    - CLI arguments
    - Default values
    """

    # Relative paths are resolved against this directory
    root_dir: Path = Field(
        default_factory=Path.cwd, description="Directory relative paths resolve against"
    )

    encoding: str = Field(default="utf-8", description="Text encoding for file content")

    batch_policy: Literal["all", "lenient"] = Field(
        default="all",
        description=(
            "How open_many aggregates per-file results: 'all' succeeds only if every "
            "file opened, 'lenient' succeeds whenever the batch itself ran"
        ),
    )

    render_diffs: bool = Field(
        default=True, description="Render a diff to the message sink on open"
    )

    max_read_bytes: int = Field(
        default=10_000_000,
        ge=1,
        description="Refuse to load files larger than this many bytes",
    )

    @field_validator("root_dir", mode="before")
    def validate_root_dir(cls, v: Any) -> Path:
        """Convert string paths to absolute Path objects."""
        if v is None or v == "":
            return Path.cwd()
        return Path(v).expanduser().absolute()

    @field_validator("encoding")
    def validate_encoding(cls, v: str) -> str:
        """Reject encodings Python does not know about."""
        import codecs

        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e
        return v

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add overlay-related CLI arguments."""
        parser.add_argument(
            "--root",
            type=Path,
            help="Root directory for relative paths (default: current directory)",
        )

        parser.add_argument(
            "--encoding",
            help="Text encoding used to read and write files (default: utf-8)",
        )

        parser.add_argument(
            "--batch-policy",
            choices=["all", "lenient"],
            help="Aggregate policy for multi-file opens",
        )

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        """Load overlay config from environment variables."""
        config: dict[str, Any] = {}
        if root := os.getenv("DIFFSTAGE_ROOT_DIR"):
            config["root_dir"] = Path(root)
        if encoding := os.getenv("DIFFSTAGE_ENCODING"):
            config["encoding"] = encoding
        if policy := os.getenv("DIFFSTAGE_BATCH_POLICY"):
            config["batch_policy"] = policy
        if render := os.getenv("DIFFSTAGE_RENDER_DIFFS"):
            config["render_diffs"] = render.strip().lower() in ("1", "true", "yes", "on")
        if max_bytes := os.getenv("DIFFSTAGE_MAX_READ_BYTES"):
            config["max_read_bytes"] = int(max_bytes)
        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Extract overlay config from CLI arguments."""
        overrides: dict[str, Any] = {}
        if hasattr(args, "root") and args.root:
            overrides["root_dir"] = args.root
        if hasattr(args, "encoding") and args.encoding:
            overrides["encoding"] = args.encoding
        if hasattr(args, "batch_policy") and args.batch_policy:
            overrides["batch_policy"] = args.batch_policy
        return overrides

    @classmethod
    def load(cls, args: Any = None, **overrides: Any) -> "OverlayConfig":
        """Build a config from env, then CLI args, then explicit overrides."""
        values = cls.load_from_env()
        if args is not None:
            values.update(cls.extract_cli_overrides(args))
        values.update(overrides)
        return cls(**values)

    def __repr__(self) -> str:
        """String representation of overlay configuration."""
        return (
            f"OverlayConfig(root_dir={self.root_dir}, encoding={self.encoding}, "
            f"batch_policy={self.batch_policy})"
        )
