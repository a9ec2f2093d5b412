"""
Tagboard Backend - Grad Service Unit Tests
===========================================

What:  GradService against a mocked AsyncSession.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from tagboard.exceptions import ConflictError, NotFoundError
from tagboard.models.grad import Grad
from tagboard.schemas.grad import GradCreate, GradUpdate
from tagboard.services.grad_service import GradService

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestGradServiceRead:

    def setup_method(self):
        self.service = GradService()

    @pytest.mark.asyncio
    async def test_list_grads_nests_offer_companies(self, mock_db_session, make_mapping_result):
        base = {"name": "Ada", "email": "ada@example.com", "created_at": NOW}
        mock_db_session.execute.return_value = make_mapping_result([
            {"id": 1, **base, "offer": "Acme"},
            {"id": 1, **base, "offer": "Globex"},
            {"id": 2, "name": "Linus", "email": "linus@example.com", "created_at": NOW, "offer": None},
        ])

        result = await self.service.list_grads(mock_db_session)

        assert [(g.id, g.offers) for g in result] == [(1, ["Acme", "Globex"]), (2, [])]

    @pytest.mark.asyncio
    async def test_get_grad_not_found(self, mock_db_session, make_mapping_result):
        mock_db_session.execute.return_value = make_mapping_result([])

        with pytest.raises(NotFoundError):
            await self.service.get_grad(mock_db_session, 5)

    @pytest.mark.asyncio
    async def test_list_offers_for_missing_grad(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.list_offers(mock_db_session, 5)

        assert exc_info.value.context["resource"] == "grad"


class TestGradServiceWrite:

    def setup_method(self):
        self.service = GradService()

    @pytest.mark.asyncio
    async def test_create_grad_with_taken_email_conflicts(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(1)

        with pytest.raises(ConflictError) as exc_info:
            await self.service.create_grad(
                mock_db_session, GradCreate(name="Ada", email="ADA@example.com")
            )

        assert exc_info.value.context == {"email": "ada@example.com"}
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_missing_offer_raises_not_found(self, mock_db_session):
        deleted = MagicMock()
        deleted.rowcount = 0
        mock_db_session.execute.return_value = deleted

        with pytest.raises(NotFoundError):
            await self.service.delete_offer(mock_db_session, 77)

    @pytest.mark.asyncio
    async def test_update_grad_email_race_conflicts(self, mock_db_session):
        grad = Grad(id=3, name="Ada", email="ada@example.com")
        # _require_grad finds the grad; the email looks free until the flush
        mock_db_session.execute.side_effect = [scalar_result(grad), scalar_result(None)]
        mock_db_session.flush.side_effect = IntegrityError(
            "UPDATE grads", {}, Exception("UNIQUE constraint failed: grads.email")
        )

        with pytest.raises(ConflictError) as exc_info:
            await self.service.update_grad(
                mock_db_session, 3, GradUpdate(email="Grace@example.com")
            )

        assert exc_info.value.context == {"email": "grace@example.com"}
