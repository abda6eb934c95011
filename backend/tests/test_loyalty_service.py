import pytest
from unittest.mock import Mock

from app.models.loyalty import ShopSetting
from app.services.loyalty_service import LoyaltyService
from ledger.models import LoyaltyTier
from ledger.tiers import DEFAULT_LOYALTY_CONFIG


@pytest.fixture
def mock_db():
    return Mock()


@pytest.fixture
def loyalty_service(mock_db):
    return LoyaltyService(db=mock_db)


def test_get_config_falls_back_to_defaults(loyalty_service, mock_db):
    # Arrange
    mock_db.query.return_value.filter.return_value.first.return_value = None

    # Act
    config = loyalty_service.get_config()

    # Assert
    assert config.points_per_currency_unit == DEFAULT_LOYALTY_CONFIG.points_per_currency_unit
    assert config.tiers[LoyaltyTier.GOLD].points_threshold == 1500
    mock_db.query.assert_called_once_with(ShopSetting)


def test_get_config_reads_legacy_keys(loyalty_service, mock_db):
    # Arrange
    mock_db.query.return_value.filter.return_value.first.return_value = ShopSetting(
        key="loyalty_config",
        value={
            "POINTS_PER_RON": 1,
            "TIERS": {"GOLD": {"points": 900, "laborDiscount": 0.2, "partsDiscount": 0.04}},
        },
    )

    # Act
    config = loyalty_service.get_config()

    # Assert
    assert config.points_per_currency_unit == 1
    assert config.tiers[LoyaltyTier.GOLD].points_threshold == 900
    assert config.tiers[LoyaltyTier.GOLD].labor_discount_rate == 0.2
    # Tiers missing from the stored value keep their defaults
    assert config.tiers[LoyaltyTier.SILVER].points_threshold == 500
