"""
Tests for channel extraction
"""

import numpy as np
import pytest

from conftest import make_line

from ionofilter.core.channels import channel_label, check_channel_index, extract_channel
from ionofilter.core.records import parse_record
from ionofilter.errors import ChannelIndexError


@pytest.fixture
def records():
    return [
        parse_record(make_line(time=f'1{i}:00:00',
                               channels=[10.0 * i + c for c in range(11)]))
        for i in range(3)
    ]


class TestExtractChannel:
    """Tests for extract_channel()"""

    def test_one_value_per_record_in_order(self, records):
        values = extract_channel(records, 5)
        np.testing.assert_array_equal(values, [5.0, 15.0, 25.0])
        assert values.dtype == np.float64

    @pytest.mark.parametrize('index', [0, 10])
    def test_range_bounds_accepted(self, records, index):
        assert len(extract_channel(records, index)) == 3

    @pytest.mark.parametrize('index', [11, -1, 100])
    def test_out_of_range_raises_index_error(self, records, index):
        with pytest.raises(IndexError):
            extract_channel(records, index)

    @pytest.mark.parametrize('index', [1.5, '0', True, None])
    def test_non_integer_index(self, records, index):
        with pytest.raises(ChannelIndexError):
            extract_channel(records, index)

    def test_numpy_integer_index(self, records):
        assert extract_channel(records, np.int64(0))[0] == 0.0

    def test_empty_records(self):
        assert len(extract_channel([], 0)) == 0

    def test_records_untouched(self, records):
        values = extract_channel(records, 0)
        values[0] = -1.0
        assert records[0].channels[0] == 0.0


class TestChannelLabels:
    """Tests for channel_label() and check_channel_index()"""

    def test_default_labels(self):
        assert channel_label(0) == 'foF2'
        assert channel_label(5) == 'hmF2'
        assert channel_label(3) == 'channel_3'

    def test_custom_labels_override_defaults(self):
        assert channel_label(0, {0: 'fof2_mhz'}) == 'fof2_mhz'
        assert channel_label(5, {0: 'fof2_mhz'}) == 'hmF2'

    def test_error_message_names_range(self):
        with pytest.raises(ChannelIndexError, match=r'\[0, 10\]'):
            check_channel_index(11)
