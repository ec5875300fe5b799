"""
Content-addressed store of RSA key records.

Every key lives in ``<Keys dir>/<SHA-256 of its XML>.xml``.  Two copies of
the same key collapse onto one file name, and a file can be checked by
re-hashing it.  Files that do not parse (or parse to an invalid key) are
renamed to ``*.invalid`` so they drop out of later loads but stay around
for inspection.

Multi-file operations never stop at the first bad file: each file gets an
``ItemResult`` and the results are folded into a ``StoreReport``.
"""

import glob
import logging
import os
from enum import Enum
from typing import NamedTuple

from config.settings import Settings
from core.crypto_engine import HashCrypto, RSAKey
from utils.markup import MarkupError, from_xml, to_xml

logger = logging.getLogger("SecurePad.KeyStore")


class ItemOutcome(Enum):
    OK      = "ok"
    SKIPPED = "skipped"
    FAILED  = "failed"


class ItemResult(NamedTuple):
    path: str
    action: str
    outcome: ItemOutcome
    error: str | None = None


class StoreReport:
    """Per-file results of one store operation."""

    def __init__(self):
        self.results: list[ItemResult] = []

    def add(self, path: str, action: str, outcome: ItemOutcome,
            error: str | None = None) -> ItemResult:
        result = ItemResult(path, action, outcome, error)
        self.results.append(result)
        return result

    def extend(self, other: "StoreReport"):
        self.results.extend(other.results)

    @property
    def succeeded(self) -> list[ItemResult]:
        return [r for r in self.results if r.outcome is ItemOutcome.OK]

    @property
    def skipped(self) -> list[ItemResult]:
        return [r for r in self.results if r.outcome is ItemOutcome.SKIPPED]

    @property
    def failed(self) -> list[ItemResult]:
        return [r for r in self.results if r.outcome is ItemOutcome.FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed

    def __repr__(self):
        return (f"StoreReport(ok={len(self.succeeded)}, "
                f"skipped={len(self.skipped)}, failed={len(self.failed)})")


class KeyStore:

    def __init__(self, keys_dir: str):
        self.keys_dir = keys_dir

    # ── helpers ──────────────────────────────────────────────────
    def exists(self) -> bool:
        return os.path.isdir(self.keys_dir)

    def _key_files(self) -> list[str]:
        pattern = os.path.join(glob.escape(self.keys_dir),
                               Settings.KEY_FILE_PATTERN)
        return sorted(p for p in glob.glob(pattern) if os.path.isfile(p))

    @staticmethod
    def serialize(key: RSAKey) -> str:
        """Canonical text of a key; also the hashing input for its name."""
        return to_xml(key).strip()

    def file_name_for(self, key: RSAKey) -> str:
        return HashCrypto.sha256_text(self.serialize(key)) + ".xml"

    def path_for(self, key: RSAKey) -> str:
        return os.path.join(self.keys_dir, self.file_name_for(key))

    def _quarantine(self, path: str, reason: str,
                    report: StoreReport) -> None:
        target = os.path.splitext(path)[0] + Settings.INVALID_SUFFIX
        try:
            os.replace(path, target)
        except OSError as exc:
            logger.warning("Cannot quarantine %s (%s); skipping it", path, exc)
            report.add(path, "quarantine", ItemOutcome.FAILED, str(exc))
            return
        logger.warning("Quarantined %s → %s: %s", path, target, reason)
        report.add(path, "quarantine", ItemOutcome.SKIPPED, reason)

    # ── load ─────────────────────────────────────────────────────
    def _scan(self, report: StoreReport) -> list[tuple[str, RSAKey]]:
        found = []
        if not self.exists():
            logger.debug("Key storage %s does not exist yet", self.keys_dir)
            return found
        for path in self._key_files():
            try:
                with open(path, "r", encoding="utf-8-sig") as f:
                    key = from_xml(RSAKey, f.read())
            except (OSError, UnicodeDecodeError, MarkupError) as exc:
                self._quarantine(path, str(exc), report)
                continue
            if not key.is_valid():
                self._quarantine(path, "key failed validation", report)
                continue
            report.add(path, "load", ItemOutcome.OK)
            found.append((path, key))
        return found

    def load_report(self) -> tuple[list[RSAKey], StoreReport]:
        report = StoreReport()
        keys = [key for _, key in self._scan(report)]
        logger.debug("Loaded %d key(s) from %s", len(keys), self.keys_dir)
        return keys, report

    def load(self) -> list[RSAKey]:
        keys, _ = self.load_report()
        return keys

    # ── purge ────────────────────────────────────────────────────
    def purge(self) -> StoreReport:
        """Delete every file in the key directory, one failure at a time."""
        report = StoreReport()
        if not self.exists():
            return report
        for entry in sorted(os.listdir(self.keys_dir)):
            path = os.path.join(self.keys_dir, entry)
            if not os.path.isfile(path):
                continue
            try:
                os.remove(path)
            except OSError as exc:
                logger.warning("Cannot delete %s: %s", path, exc)
                report.add(path, "delete", ItemOutcome.FAILED, str(exc))
            else:
                report.add(path, "delete", ItemOutcome.OK)
        return report

    # ── save ─────────────────────────────────────────────────────
    def save(self, keys, purge: bool = False) -> StoreReport:
        """
        Merge *keys* into the store and rewrite every stored key under
        its content-hash name.

        With ``purge=True`` the directory is emptied first, so the store
        afterwards holds exactly the valid records of *keys*.
        """
        os.makedirs(self.keys_dir, exist_ok=True)
        if purge:
            report = self.purge()
            report.extend(self.save(keys, purge=False))
            return report

        report = StoreReport()
        merged: list[tuple[RSAKey, list[str]]] = []

        def _merge(key: RSAKey, source: str | None):
            for existing, sources in merged:
                if existing == key:
                    if source:
                        sources.append(source)
                    return
            merged.append((key, [source] if source else []))

        for path, key in self._scan(report):
            _merge(key, path)
        for key in keys:
            if not key.is_valid():
                logger.warning("Refusing to store invalid key %r", key)
                report.add(getattr(key, "name", "?"), "store",
                           ItemOutcome.SKIPPED, "key failed validation")
                continue
            _merge(key, None)

        for key, sources in merged:
            self._write(key, sources, report)
        logger.info("Key storage %s now holds %d key(s)",
                    self.keys_dir, len(merged))
        return report

    def _write(self, key: RSAKey, sources: list[str],
               report: StoreReport) -> None:
        data = self.serialize(key)
        target = os.path.join(self.keys_dir,
                              HashCrypto.sha256_text(data) + ".xml")
        try:
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(data)
        except OSError as exc:
            logger.warning("Cannot write %s: %s", target, exc)
            report.add(target, "write", ItemOutcome.FAILED, str(exc))
            return
        report.add(target, "write", ItemOutcome.OK)

        # older copies under a different name are superseded by target
        for source in sources:
            if os.path.normcase(os.path.abspath(source)) == \
                    os.path.normcase(os.path.abspath(target)):
                continue
            try:
                os.remove(source)
            except OSError as exc:
                logger.warning("Cannot remove stale key file %s: %s",
                               source, exc)
                report.add(source, "remove", ItemOutcome.FAILED, str(exc))
            else:
                report.add(source, "remove", ItemOutcome.OK)

    # ── verification ─────────────────────────────────────────────
    def verify(self) -> list[str]:
        """Return key files whose name is not the hash of their content."""
        mismatched = []
        for path in self._key_files():
            try:
                with open(path, "r", encoding="utf-8-sig") as f:
                    data = f.read().strip()
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Cannot read %s: %s", path, exc)
                mismatched.append(path)
                continue
            stem = os.path.splitext(os.path.basename(path))[0]
            if stem.upper() != HashCrypto.sha256_text(data):
                mismatched.append(path)
        return mismatched
