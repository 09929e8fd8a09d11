"""Observers notified by the exhaustive search as it scans the database."""

from typing import TYPE_CHECKING

from tqdm import tqdm

if TYPE_CHECKING:
    from .topk import Candidate


class SearchObserver:
    """No-op base observer. Subclass and override the hooks you need.

    Exactly one of on_finish or on_error follows on_start.
    """

    def on_start(self, total: int) -> None:
        pass

    def on_compare(self, candidate: "Candidate", admitted: bool) -> None:
        pass

    def on_finish(self, results: list["Candidate"]) -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass


class TqdmProgressObserver(SearchObserver):
    """Shows a tqdm bar advanced once per database vector."""

    def __init__(self, desc: str = "Searching", **tqdm_kwargs):
        self.desc = desc
        self.tqdm_kwargs = tqdm_kwargs
        self._pbar: tqdm | None = None

    def on_start(self, total: int) -> None:
        self._pbar = tqdm(total=total, desc=self.desc, unit="vec", **self.tqdm_kwargs)

    def on_compare(self, candidate: "Candidate", admitted: bool) -> None:
        if self._pbar is not None:
            self._pbar.update(1)

    def on_finish(self, results: list["Candidate"]) -> None:
        self.close()

    def on_error(self, error: Exception) -> None:
        self.close()

    def close(self) -> None:
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None


class DecileProgressObserver(SearchObserver):
    """Prints a progress line every tenth of the database.

    Databases smaller than 10 vectors get only the start banner.
    """

    def __init__(self, write=print):
        self.write = write
        self._total = 0
        self._seen = 0

    def on_start(self, total: int) -> None:
        self._total = total
        self._seen = 0
        self.write("\n[Search Progress]")
        self.write(f"Comparing query vector against {total} vectors...")

    def on_compare(self, candidate: "Candidate", admitted: bool) -> None:
        self._seen += 1
        if self._total >= 10 and self._seen % (self._total // 10) == 0:
            self.write(f"  Progress: {self._seen}/{self._total} vectors")

    def on_error(self, error: Exception) -> None:
        self.write(f"  Aborted after {self._seen}/{self._total} vectors: {error}")
