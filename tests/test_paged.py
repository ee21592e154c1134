"""Tests for pagination models"""

from typing import get_type_hints

import pytest
from pydantic import ValidationError

from restcrud.application.services.base import CRUDService
from restcrud.core.paged import Paged
from restcrud.infrastructure.database.repositories.base import CRUDRepository
from restcrud.testing import InMemoryCRUDRepository


class TestPaged:
    def test_of_derives_total_pages(self):
        """Test that the page count is rounded up"""
        paged = Paged.of([1, 2], page=0, per_page=2, total_count=5)

        assert paged.data == [1, 2]
        assert paged.total_pages == 3

    def test_of_with_no_items(self):
        """Test that an empty store has no pages"""
        assert Paged.of([], page=0, per_page=20, total_count=0).total_pages == 0

    def test_empty(self):
        paged = Paged.empty(page=3, per_page=10, total_pages=2)

        assert paged.data == []
        assert paged.page == 3
        assert paged.per_page == 10
        assert paged.total_pages == 2

    def test_map_keeps_pagination(self):
        """Test that mapping only changes the items"""
        paged = Paged.of([1, 2, 3], page=1, per_page=3, total_count=7)

        mapped = paged.map(str)

        assert mapped == Paged(data=["1", "2", "3"], page=1, per_page=3, total_pages=3)

    def test_parametrized_page_validates_items(self):
        """Test that a parametrized page validates its items"""
        paged = Paged[int](data=["1", 2], page=0, per_page=2, total_pages=1)

        assert paged.data == [1, 2]

        with pytest.raises(ValidationError):
            Paged[int](data=["x"], page=0, per_page=2, total_pages=1)

    @pytest.mark.parametrize(
        "page,per_page,total_pages",
        [(-1, 1, 0), (0, 0, 0), (0, 1, -1)],
    )
    def test_rejects_invalid_pagination(self, page, per_page, total_pages):
        with pytest.raises(ValidationError):
            Paged(data=[], page=page, per_page=per_page, total_pages=total_pages)


class TestPagedEntityAnnotations:
    def test_entity_pages_in_store_and_service_signatures(self):
        """Test that pages of entities can be declared for any entity type"""
        assert issubclass(get_type_hints(CRUDRepository.find_page)["return"], Paged)
        assert issubclass(get_type_hints(InMemoryCRUDRepository.find_page)["return"], Paged)
        assert issubclass(get_type_hints(CRUDService._list_using_repository)["return"], Paged)
