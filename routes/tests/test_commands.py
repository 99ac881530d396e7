from io import StringIO

import pytest
from django.core.management import CommandError, call_command


def test_prints_estimate():
    out = StringIO()
    call_command('estimate_truck_duration', '400', stdout=out)
    assert out.getvalue().strip() == "400.0 km: 7 hours 30 mins (450 min), rest stops: 1"


def test_hint_option():
    out = StringIO()
    call_command('estimate_truck_duration', '10', '--hint', 'city', stdout=out)
    assert "(44 min)" in out.getvalue()


def test_rejects_negative_distance():
    with pytest.raises(CommandError):
        call_command('estimate_truck_duration', '-3')
