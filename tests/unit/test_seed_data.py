import os
import sys
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
import pytest
from unittest.mock import MagicMock, patch

from scripts import seed_data

@pytest.mark.asyncio
async def test_seed_refuses_in_memory_backend():
    mock_pipeline = MagicMock()
    with patch("scripts.seed_data.settings") as mock_settings, \
         patch("scripts.seed_data.pipeline", mock_pipeline):
        mock_settings.STATE_BACKEND = "memory"

        assert await seed_data.seed() is False

    mock_pipeline.bills.save.assert_not_called()
    mock_pipeline.lifecycle.create_subscription.assert_not_called()

@pytest.mark.asyncio
async def test_seed_writes_sample_data_to_persistent_backend(test_pipeline):
    with patch("scripts.seed_data.settings") as mock_settings, \
         patch("scripts.seed_data.pipeline", test_pipeline):
        mock_settings.STATE_BACKEND = "mongo"

        assert await seed_data.seed() is True

    assert await test_pipeline.bills.count() == len(seed_data.SAMPLE_BILLS)
    assert len(await test_pipeline.subscriptions.list()) == len(seed_data.SAMPLE_SUBSCRIPTIONS)
