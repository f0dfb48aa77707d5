import os

import pytest

os.environ.setdefault('MPLBACKEND', 'Agg')


@pytest.fixture
def scenario_a():
    """Ten identical failure reports and two unrelated ones."""
    docs = [(f'fail-{i}', 'Device failure error') for i in range(10)]
    docs.append(('battery', 'Battery swelling'))
    docs.append(('screen', 'Screen crack'))
    return docs


@pytest.fixture
def three_groups():
    """Groups of 5, 4 and 3 identical narratives without shared words."""
    docs = [(f'pump-{i}', 'The pump raised an occlusion alarm.') for i in range(5)]
    docs += [(f'battery-{i}', 'Battery swelling and heat.') for i in range(4)]
    docs += [(f'screen-{i}', 'Screen crack on the display!') for i in range(3)]
    return docs
