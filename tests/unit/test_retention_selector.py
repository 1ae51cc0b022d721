"""
Unit tests for retention selection.

Tests classic (mtime-based) and manifest-driven blacklist computation,
retain-count validation and stat failure handling.
"""

import logging
import os
from unittest.mock import patch

import pytest

from repodata_retention.exceptions import DirectoryAccessError, InvalidRetainCountError
from repodata_retention.models import MetadataFamily, RetentionStrategy
from repodata_retention.selector import (
    STAT_FAILURE_MTIME,
    blacklist_classic,
    blacklist_from_manifest,
    build_blacklist,
    scan_families,
    validate_retain_count,
)

T0 = 1_700_000_000


@pytest.fixture
def repodata(tmp_path):
    """Fixture providing an empty repodata directory."""
    path = tmp_path / "repodata"
    path.mkdir()
    return path


@pytest.mark.unit
class TestValidateRetainCount:
    """Test retain-count validation."""

    @pytest.mark.parametrize("retain", [-1, 0, 1, 10])
    def test_accepts_valid_counts(self, retain):
        """Test that -1 and non-negative counts are accepted."""
        validate_retain_count(retain)

    @pytest.mark.parametrize("retain", [-2, -5, -100])
    def test_rejects_counts_below_minus_one(self, retain):
        """Test that other negative counts are rejected."""
        with pytest.raises(InvalidRetainCountError) as exc_info:
            validate_retain_count(retain)
        assert exc_info.value.retain == retain
        assert exc_info.value.recoverable is False


@pytest.mark.unit
class TestScanFamilies:
    """Test grouping of directory entries into families."""

    def test_groups_and_sorts_newest_first(self, repodata, make_file):
        """Test that files are grouped per family, most recent first."""
        make_file(repodata, "a-primary.xml.gz", T0)
        make_file(repodata, "b-primary.xml.gz", T0 + 20)
        make_file(repodata, "c-primary.xml.gz", T0 + 10)
        make_file(repodata, "a-other.sqlite.bz2", T0)
        make_file(repodata, "repomd.xml", T0)

        families = scan_families(str(repodata))

        assert set(families) == {MetadataFamily.PRIMARY_XML, MetadataFamily.OTHER_DB}
        names = [os.path.basename(r.path) for r in families[MetadataFamily.PRIMARY_XML]]
        assert names == ["b-primary.xml.gz", "c-primary.xml.gz", "a-primary.xml.gz"]

    def test_stat_failure_uses_sentinel(self, repodata, make_file):
        """Test that unstatable files get the sentinel timestamp and sort last."""
        make_file(repodata, "a-primary.xml.gz", T0)
        make_file(repodata, "b-primary.xml.gz", T0 + 10)

        real_stat = os.stat

        def failing_stat(path, *args, **kwargs):
            if str(path).endswith("b-primary.xml.gz"):
                raise PermissionError(13, "Permission denied")
            return real_stat(path, *args, **kwargs)

        with patch("repodata_retention.selector.os.stat", side_effect=failing_stat):
            families = scan_families(str(repodata))

        records = families[MetadataFamily.PRIMARY_XML]
        assert os.path.basename(records[-1].path) == "b-primary.xml.gz"
        assert records[-1].mtime == STAT_FAILURE_MTIME

    def test_missing_directory_raises(self, tmp_path):
        """Test that an unopenable directory is a hard error."""
        with pytest.raises(DirectoryAccessError) as exc_info:
            scan_families(str(tmp_path / "missing"))
        assert exc_info.value.path == str(tmp_path / "missing")


@pytest.mark.unit
class TestBlacklistClassic:
    """Test classic retention selection."""

    def test_retain_all_never_touches_filesystem(self, tmp_path):
        """Test that -1 short-circuits before listing the directory."""
        with patch("repodata_retention.selector.scan_families") as mock_scan:
            assert blacklist_classic(str(tmp_path / "missing"), -1) == set()
        mock_scan.assert_not_called()

    def test_invalid_retain_never_opens_directory(self, tmp_path):
        """Test that invalid counts fail before listing the directory."""
        with patch("repodata_retention.selector.scan_families") as mock_scan:
            with pytest.raises(InvalidRetainCountError):
                blacklist_classic(str(tmp_path), -2)
        mock_scan.assert_not_called()

    def test_retain_one_blacklists_older_files(self, repodata, make_file):
        """Test that only the newest file of a family survives."""
        make_file(repodata, "a1-primary.xml.gz", T0)
        make_file(repodata, "a2-primary.xml.gz", T0 + 10)
        make_file(repodata, "a3-primary.gz", T0 - 10)

        assert blacklist_classic(str(repodata), 1) == {"a1-primary.xml.gz"}

    @pytest.mark.parametrize("retain,expected", [(0, 3), (1, 2), (2, 1), (3, 0), (5, 0)])
    def test_blacklists_max_k_minus_n(self, repodata, make_file, retain, expected):
        """Test that exactly max(k - n, 0) of the oldest files are blacklisted."""
        for i in range(3):
            make_file(repodata, f"h{i}-filelists.sqlite.bz2", T0 + i)

        blacklist = blacklist_classic(str(repodata), retain)

        assert len(blacklist) == expected
        oldest = [f"h{i}-filelists.sqlite.bz2" for i in range(3)][:expected]
        assert blacklist == set(oldest)

    def test_families_are_retained_independently(self, repodata, make_file):
        """Test that the retain count applies per family, not globally."""
        make_file(repodata, "p1-primary.xml.gz", T0)
        make_file(repodata, "p2-primary.xml.gz", T0 + 1)
        make_file(repodata, "p1-primary.sqlite.bz2", T0)
        make_file(repodata, "p2-primary.sqlite.bz2", T0 + 1)
        make_file(repodata, "o1-other.xml.gz", T0 + 5)

        blacklist = blacklist_classic(str(repodata), 1)

        assert blacklist == {"p1-primary.xml.gz", "p1-primary.sqlite.bz2"}

    def test_unclassified_files_never_blacklisted(self, repodata, make_file):
        """Test that repomd.xml and other metadata are left alone."""
        make_file(repodata, "repomd.xml", T0)
        make_file(repodata, "x-comps.xml.gz", T0)
        make_file(repodata, "x-updateinfo.xml.gz", T0)

        assert blacklist_classic(str(repodata), 0) == set()

    def test_missing_directory_is_hard_error(self, tmp_path, caplog):
        """Test that an unopenable directory is raised and logged."""
        caplog.set_level(logging.WARNING, logger="repodata_retention")

        with pytest.raises(DirectoryAccessError):
            blacklist_classic(str(tmp_path / "missing"), 0)

        assert "Cannot open directory" in caplog.text


@pytest.mark.unit
class TestBlacklistFromManifest:
    """Test manifest-driven retention selection."""

    @pytest.mark.parametrize("retain", [-1, 1, 3])
    def test_nonzero_retain_blacklists_nothing(self, repodata, write_repomd, retain):
        """Test that only retain == 0 produces entries."""
        write_repomd(repodata, [("primary", "repodata/a-primary.xml.gz", None)])

        with patch("repodata_retention.selector.parse_repomd") as mock_parse:
            assert blacklist_from_manifest(str(repodata), retain) == set()
        mock_parse.assert_not_called()

    def test_invalid_retain_raises(self, repodata):
        """Test that counts below -1 are rejected."""
        with pytest.raises(InvalidRetainCountError):
            blacklist_from_manifest(str(repodata), -2)

    def test_blacklists_referenced_basenames(self, repodata, write_repomd):
        """Test that referenced files are blacklisted by base name."""
        write_repomd(
            repodata,
            [
                ("primary", "repodata/a-primary.xml.gz", None),
                ("filelists", "repodata/b-filelists.xml.gz", None),
                ("group", "repodata/c-comps.xml", None),
            ],
        )

        blacklist = blacklist_from_manifest(str(repodata), 0)

        assert blacklist == {"a-primary.xml.gz", "b-filelists.xml.gz", "c-comps.xml"}

    def test_skips_records_with_base_or_without_href(self, repodata, write_repomd, caplog):
        """Test that base-located and href-less records are excluded."""
        caplog.set_level(logging.DEBUG, logger="repodata_retention")
        write_repomd(
            repodata,
            [
                ("primary", "repodata/a-primary.xml.gz", None),
                ("other", "repodata/b-other.xml.gz", "http://mirror.example.com/"),
                ("filelists", None, None),
            ],
        )

        blacklist = blacklist_from_manifest(str(repodata), 0)

        assert blacklist == {"a-primary.xml.gz"}
        assert "Record without location href in old repo" in caplog.text
        assert "(type: filelists)" in caplog.text
        assert "base location is ignored" in caplog.text

    def test_unparseable_manifest_degrades_to_empty(self, repodata, caplog):
        """Test that a broken manifest is logged, not raised."""
        caplog.set_level(logging.WARNING, logger="repodata_retention")
        (repodata / "repomd.xml").write_text("<repomd><data")

        assert blacklist_from_manifest(str(repodata), 0) == set()
        assert "Cannot parse repomd" in caplog.text

    def test_missing_manifest_degrades_to_empty(self, tmp_path):
        """Test that an absent manifest blacklists nothing."""
        assert blacklist_from_manifest(str(tmp_path / "missing"), 0) == set()

    def test_custom_manifest_filename(self, repodata, write_repomd):
        """Test reading a manifest stored under another name."""
        write_repomd(
            repodata, [("primary", "a-primary.xml.gz", None)], filename="old-repomd.xml"
        )

        blacklist = blacklist_from_manifest(str(repodata), 0, "old-repomd.xml")

        assert blacklist == {"a-primary.xml.gz"}


@pytest.mark.unit
class TestBuildBlacklist:
    """Test strategy dispatch."""

    def test_classic_is_default(self, tmp_path):
        """Test that the classic strategy runs by default."""
        with patch("repodata_retention.selector.blacklist_classic", return_value={"x"}) as mock_classic:
            assert build_blacklist(str(tmp_path), 0) == {"x"}
        mock_classic.assert_called_once_with(str(tmp_path), 0)

    def test_manifest_strategy(self, tmp_path):
        """Test that the manifest strategy is dispatched with the manifest name."""
        with patch(
            "repodata_retention.selector.blacklist_from_manifest", return_value={"y"}
        ) as mock_manifest:
            result = build_blacklist(
                str(tmp_path), 0, RetentionStrategy.MANIFEST, "repomd.xml"
            )
        assert result == {"y"}
        mock_manifest.assert_called_once_with(str(tmp_path), 0, "repomd.xml")
