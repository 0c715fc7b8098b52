"""
Resume Parser Engine
====================
Main orchestrator that combines page extraction, layout reconstruction,
section classification and position parsing into a complete pipeline.

Usage:
    engine = ParserEngine(config)
    document = await engine.parse(pdf_bytes)
    # document is a ParsedDocument with a summary and positions

Architecture:
    PDF → BlockExtractor → RawPages → Layout → Groups → Sections →
    PositionParser → ParsedDocument
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .block_extractor import BlockExtractor
from .errors import NoPositionsFoundError
from .layout import PAGE_HEADER_FRAGMENTS, build_layout
from .models import ParsedDocument, RawPage, SectionKind
from .sections import (
    EXPERIENCE_LABEL,
    SUMMARY_LABEL,
    classify_groups,
    collect_sections,
    summary_text,
)
from .state_machine import DATE_SEPARATOR, JOB_SEPARATOR, PositionParser

logger = logging.getLogger(__name__)


@dataclass
class ParserConfig:
    """Configuration for the parser engine."""

    # Template
    job_separator: str = JOB_SEPARATOR
    date_separator: str = DATE_SEPARATOR
    summary_label: str = SUMMARY_LABEL
    experience_label: str = EXPERIENCE_LABEL
    header_fragment_count: int = PAGE_HEADER_FRAGMENTS
    skip_duration_lines: bool = True

    # Horizontal rule detection
    separator_min_aspect: float = 5.0
    separator_max_height: float = 5.0

    # Logging
    log_level: Optional[str] = None
    log_file: Optional[str] = None


class ParserEngine:
    """
    Main resume parsing engine.

    Orchestrates the full pipeline:
        1. Page extraction (text fragments + horizontal rules)
        2. Grouping between rules and page-break merging
        3. Section classification
        4. Position parsing

    Holds no state between runs; one engine may serve concurrent parses.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self._setup_logging()

    def _setup_logging(self):
        """
        Configure package logging from config.

        A config with neither ``log_level`` nor ``log_file`` leaves logging
        to the host application. Handlers are added once per destination,
        so engines built per call do not stack them.
        """
        if self.config.log_level is None and not self.config.log_file:
            return

        level_name = (self.config.log_level or "INFO").upper()
        log_level = getattr(logging, level_name, logging.INFO)

        # Configure root logger for the package
        package_logger = logging.getLogger("resume_parser")
        if (
            self.config.log_level is not None
            or package_logger.level == logging.NOTSET
        ):
            package_logger.setLevel(log_level)

        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        # Console handler
        has_console = any(
            isinstance(handler, logging.StreamHandler)
            and not isinstance(handler, logging.FileHandler)
            for handler in package_logger.handlers
        )
        if self.config.log_level is not None and not has_console:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(formatter)
            package_logger.addHandler(console)

        # File handler
        if self.config.log_file:
            log_path = os.path.abspath(self.config.log_file)
            if any(
                getattr(handler, "baseFilename", None) == log_path
                for handler in package_logger.handlers
            ):
                return

            Path(log_path).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)

    def extract(self, pdf_bytes: bytes) -> list[RawPage]:
        """Run the layout extractor on a PDF."""
        extractor = BlockExtractor(
            separator_min_aspect=self.config.separator_min_aspect,
            separator_max_height=self.config.separator_max_height,
        )
        return extractor.extract(pdf_bytes)

    def parse_pages(self, pages: list[RawPage]) -> ParsedDocument:
        """
        Parse extracted pages into a summary and positions.

        Args:
            pages: Raw page structure from the layout extractor.

        Returns:
            ParsedDocument with at least one position.

        Raises:
            NoPositionsFoundError: If no Experience section or no position
                header was found.
            StructuralParseError: If the Experience section is malformed.
        """
        groups = build_layout(pages, self.config.header_fragment_count)
        logger.info(f"Reconstructed {len(groups)} groups from {len(pages)} pages")

        sections = collect_sections(classify_groups(
            groups,
            summary_label=self.config.summary_label,
            experience_label=self.config.experience_label,
        ))

        summary = None
        if SectionKind.SUMMARY in sections:
            summary = summary_text(sections[SectionKind.SUMMARY])

        positions = []
        experience = sections.get(SectionKind.EXPERIENCE)
        if experience is not None:
            parser = PositionParser(
                job_separator=self.config.job_separator,
                date_separator=self.config.date_separator,
                skip_duration_lines=self.config.skip_duration_lines,
            )
            positions = parser.parse(experience.fragments)
        else:
            logger.warning("No Experience section found")

        if not positions:
            raise NoPositionsFoundError()

        return ParsedDocument(summary=summary, positions=positions)

    def parse_bytes(self, pdf_bytes: bytes) -> ParsedDocument:
        """Synchronous parse of a PDF held in memory."""
        start_time = time.time()

        logger.info("Phase 1: Page extraction")
        pages = self.extract(pdf_bytes)

        logger.info("Phase 2: Layout and position parsing")
        document = self.parse_pages(pages)

        elapsed = time.time() - start_time
        logger.info(
            f"Parse complete in {elapsed:.2f}s, "
            f"{len(document.positions)} positions extracted"
        )
        return document

    async def parse(self, pdf_bytes: bytes) -> ParsedDocument:
        """
        Parse a PDF without blocking the event loop.

        Extraction and parsing run in the default executor; any failure
        is raised from the await, no partial document is returned.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.parse_bytes, pdf_bytes)


async def parse(
    pdf_bytes: bytes,
    config: Optional[ParserConfig] = None,
) -> ParsedDocument:
    """Parse a resume PDF into a ParsedDocument."""
    return await ParserEngine(config).parse(pdf_bytes)
