"""Shared fixtures for Chapter Flattener tests."""

import copy
import json
import os
from unittest.mock import patch

import pytest


SAMPLE_DOCUMENT = {
    "contentMetadata": {
        "chapterInfo": {
            "brandIntroDurationMs": 2043,
            "brandOutroDurationMs": 5062,
            "chapters": [
                {
                    "lengthMs": 25000,
                    "startOffsetMs": 0,
                    "startOffsetSec": 0,
                    "title": "Opening Credits"
                },
                {
                    "lengthMs": 600000,
                    "startOffsetMs": 25000,
                    "startOffsetSec": 25,
                    "title": "Part 1",
                    "chapters": [
                        {
                            "lengthMs": 300000,
                            "startOffsetMs": 25000,
                            "startOffsetSec": 25,
                            "title": "Ch 1"
                        },
                        {
                            "lengthMs": 300000,
                            "startOffsetMs": 325000,
                            "startOffsetSec": 325,
                            "title": "Ch 2"
                        }
                    ]
                },
                {
                    "title": "Part 2",
                    "chapters": [
                        {
                            "lengthMs": 120000,
                            "startOffsetMs": 625000,
                            "startOffsetSec": 625,
                            "title": "Ch 3"
                        }
                    ]
                }
            ],
            "isAccurate": True,
            "runtimeLengthMs": 745000,
            "runtimeLengthSec": 745
        },
        "contentReference": {
            "acr": "BK_ADBL_000001",
            "asin": "B000000001",
            "codec": "AAX_44_128",
            "content_format": "M4A_ACR_44_128",
            "content_size_in_bytes": 123456789,
            "file_version": "1",
            "marketplace": "AF2M0KC94RCEA",
            "sku": "BK_ADBL_000001",
            "tempo": "1.0",
            "version": "30948233"
        },
        "lastPositionHeard": {
            "status": "DoesNotExist"
        }
    },
    "responseGroups": [
        "always-returned",
        "chapter_info",
        "content_reference",
        "last_position_heard"
    ]
}


@pytest.fixture
def sample_document():
    """A chapters document with a leaf, a dual-role part and a pure container part."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def chapters_dir(tmp_path):
    """An empty working directory with CHAPTERS_* settings cleared.

    The environment is restored afterwards, including values a .env file
    loaded during the test.
    """
    with patch.dict(os.environ):
        os.environ.pop("CHAPTERS_DIR", None)
        os.environ.pop("CHAPTERS_BACKUP", None)
        yield tmp_path


@pytest.fixture
def write_chapters_file():
    """Return a helper that writes a chapters document and returns its path."""
    def write(directory, name, data):
        path = directory / name
        path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        return path
    return write
