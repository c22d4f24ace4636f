"""Unit tests for the ORM model backing document collections.

These tests verify basic mapping correctness: table name, the composite
primary key and the JSON body column.
"""

import pytest
from sqlalchemy import JSON

from menuboard.models import Document

pytest.importorskip("sqlalchemy")


def test_table_name():
    """The model maps onto the single document table."""
    assert Document.__tablename__ == "document"


def test_composite_primary_key():
    """Documents are addressed by (collection, doc_id)."""
    pk_names = [c.name for c in Document.__table__.primary_key]
    assert pk_names == ["collection", "doc_id"]


def test_data_column_is_json():
    column = Document.__table__.c.data
    assert isinstance(column.type, JSON)
    assert column.nullable is False


def test_path_property():
    assert Document(collection="projects", doc_id="p1", data={}).path == "projects/p1"
