from datetime import date

import pytest

from falak.methods import CalculationMethod
from falak.models import GeoCoordinates

OTTAWA = GeoCoordinates(latitude=45.3506, longitude=-75.7930)
MECCA = GeoCoordinates(latitude=21.4225, longitude=39.8262)


@pytest.fixture
def ottawa_params():
    return CalculationMethod.NORTH_AMERICA.parameters(time_zone="America/Toronto")


@pytest.fixture
def mecca_params():
    return CalculationMethod.MUSLIM_WORLD_LEAGUE.parameters(time_zone="Asia/Riyadh")


@pytest.fixture
def march_11():
    return date(2024, 3, 11)
