"""
Directory-level outline extraction.

Every PDF in an input directory is validated, run through the outline
pipeline and written as ``<stem>.json`` next to its siblings in the output
directory. A failing file is recorded and skipped; it never stops the batch.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Dict, Any, Iterator, Optional, Tuple

from .config import MAX_WORKERS, ExtractionSettings
from .extractor import OutlineExtractor
from .json_handler import JSONHandler
from .logging_config import setup_logging, handle_processing_error
from .pdf_extractor import PDFLayoutReader

logger = setup_logging()

# (source file, written JSON or None, exception or None)
Outcome = Tuple[Path, Optional[Dict[str, Any]], Optional[Exception]]


@dataclass
class FileFailure:
    file: str
    error: str
    error_type: str


@dataclass
class BatchStats:
    """
    Counters of one directory run.

    ``successful`` counts every file whose JSON was written, ``degraded`` the
    subset of those that carry the error outline.
    """
    total_files: int = 0
    successful: int = 0
    degraded: int = 0
    failed: int = 0
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    errors: List[FileFailure] = field(default_factory=list)

    @property
    def total_time(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return self.end_time - self.start_time

    @property
    def success_rate(self) -> float:
        if not self.total_files:
            return 0.0
        return self.successful / self.total_files * 100

    def record_written(self, json_data: Dict[str, Any]) -> None:
        self.successful += 1
        if 'error' in json_data:
            self.degraded += 1

    def record_failure(self, pdf_file: Path, error: Exception) -> None:
        self.failed += 1
        self.errors.append(FileFailure(
            file=str(pdf_file),
            error=str(error),
            error_type=type(error).__name__
        ))

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary view, with derived timings once the run has finished."""
        data = asdict(self)
        if self.end_time is not None and self.total_files:
            data['total_time'] = self.total_time
            data['success_rate'] = self.success_rate
            data['average_time_per_file'] = self.total_time / self.total_files
        return data


class BatchProcessor:
    """
    Runs outline extraction over a directory of PDF files.

    One reader, extractor and JSON handler are shared by all documents; none
    of them keeps per-document state, so worker threads can use them directly.
    """

    def __init__(self, max_workers: Optional[int] = None,
                 settings: Optional[ExtractionSettings] = None):
        """
        Args:
            max_workers: Documents processed concurrently, defaults to OUTLINE_MAX_WORKERS
            settings: Optional pipeline settings
        """
        self.max_workers = max(1, max_workers or MAX_WORKERS)
        self.reader = PDFLayoutReader()
        self.extractor = OutlineExtractor(settings)
        self.json_handler = JSONHandler()
        self.reset_stats()

    def reset_stats(self) -> None:
        self.stats = BatchStats()

    def process_directory(self, input_dir: str, output_dir: str) -> Dict[str, Any]:
        """
        Extract the outline of every PDF in ``input_dir`` into ``output_dir``.

        Args:
            input_dir: Directory containing PDF files
            output_dir: Directory receiving the JSON files, created if missing

        Returns:
            Statistics of the run as a dictionary

        Raises:
            FileNotFoundError: If the input directory does not exist
            NotADirectoryError: If the input path is not a directory
        """
        input_path = Path(input_dir)
        output_path = Path(output_dir)

        if not input_path.exists():
            raise FileNotFoundError(f"Input directory does not exist: {input_dir}")
        if not input_path.is_dir():
            raise NotADirectoryError(f"Input path is not a directory: {input_dir}")

        output_path.mkdir(parents=True, exist_ok=True)

        pdf_files = self._discover_pdf_files(input_path)
        self.reset_stats()

        if not pdf_files:
            logger.warning(f"No PDF files found in {input_dir}")
            return self.stats.to_dict()

        logger.info(f"Processing {len(pdf_files)} PDF files: {input_dir} -> {output_dir}")
        self.stats.total_files = len(pdf_files)
        self.stats.start_time = time.time()

        for position, (pdf_file, json_data, error) in enumerate(
                self._iter_outcomes(pdf_files, output_path), 1):
            progress = f"[{position}/{len(pdf_files)}] {pdf_file.name}"
            if error is not None:
                self.stats.record_failure(pdf_file, error)
                handle_processing_error(pdf_file.name, error, logger)
                logger.info(f"{progress}: skipped")
            elif 'error' in json_data:
                self.stats.record_written(json_data)
                logger.warning(f"{progress}: wrote error outline ({json_data['error']})")
            else:
                self.stats.record_written(json_data)
                logger.info(f"{progress}: {len(json_data['outline'])} outline items")

        self.stats.end_time = time.time()
        self._log_summary()

        return self.stats.to_dict()

    def _discover_pdf_files(self, input_dir: Path) -> List[Path]:
        """PDF files directly inside ``input_dir`` (any extension case), sorted by name."""
        pdf_files = sorted(
            (path for path in input_dir.iterdir()
             if path.is_file() and path.suffix.lower() == '.pdf'),
            key=lambda path: path.name.lower()
        )
        logger.debug(f"Discovered PDF files: {[path.name for path in pdf_files]}")
        return pdf_files

    def _iter_outcomes(self, pdf_files: List[Path], output_dir: Path) -> Iterator[Outcome]:
        """
        Yield one outcome per file, in input order when sequential and in
        completion order when running on a thread pool.
        """
        if self.max_workers == 1:
            for pdf_file in pdf_files:
                yield self._attempt(pdf_file, output_dir / f"{pdf_file.stem}.json")
            return

        logger.info(f"Using {self.max_workers} worker threads")
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._attempt, pdf_file, output_dir / f"{pdf_file.stem}.json")
                for pdf_file in pdf_files
            ]
            for future in as_completed(futures):
                yield future.result()

    def _attempt(self, pdf_file: Path, output_file: Path) -> Outcome:
        try:
            return pdf_file, self._process_document(pdf_file, output_file), None
        except Exception as e:
            return pdf_file, None, e

    def _process_document(self, pdf_file: Path, output_file: Path) -> Dict[str, Any]:
        """
        Validate, extract and write one document.

        Input errors and write failures propagate; extraction failures have
        already been turned into the error outline by the extractor.
        """
        start_time = time.time()

        pdf_file = self.reader.validate(pdf_file)
        result = self.extractor.extract(self.reader.iter_page_layouts(pdf_file), source=pdf_file.name)
        json_data = self.json_handler.process_and_write(result, output_file)

        logger.debug(f"{pdf_file.name} done in {time.time() - start_time:.2f}s")
        return json_data

    def process_single_pdf(self, pdf_path: str, output_path: str) -> bool:
        """
        Extract one PDF into an explicit output file.

        Returns:
            True if the JSON file was written
        """
        try:
            self._process_document(Path(pdf_path), Path(output_path))
        except Exception as e:
            handle_processing_error(str(pdf_path), e, logger)
            return False
        return True

    def _log_summary(self) -> None:
        stats = self.stats
        logger.info("=" * 60)
        logger.info(
            f"Batch finished: {stats.successful}/{stats.total_files} written "
            f"({stats.degraded} with error outline), {stats.failed} failed"
        )
        logger.info(
            f"Elapsed {stats.total_time:.2f}s, "
            f"{stats.total_time / stats.total_files:.2f}s per file, "
            f"success rate {stats.success_rate:.1f}%"
        )
        for failure in stats.errors[-5:]:
            logger.info(f"  - {failure.file}: {failure.error_type}")
        logger.info("=" * 60)


def process_pdf_directory(input_dir: str, output_dir: str,
                          max_workers: Optional[int] = None) -> Dict[str, Any]:
    """
    Convenience function to process a directory of PDF files.

    Returns:
        Processing statistics
    """
    processor = BatchProcessor(max_workers=max_workers)
    return processor.process_directory(input_dir, output_dir)
