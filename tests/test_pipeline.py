#!/usr/bin/env python3
"""
Tests for the station filter pipeline

Covers the full parse -> sort -> extract -> filter -> sink flow, batch
failures, and channel failures that must not block other channels.
"""

import logging
from pathlib import Path

import numpy as np
import pytest

from conftest import HEADER, RecordingPlotSink, make_line, make_station_text

from ionofilter.core.chrono import chrono_key
from ionofilter.errors import ConfigError, FileAccessError, SchemaViolation
from ionofilter.pipeline import FilterPipeline, PipelineConfig, run_pipeline
from ionofilter.plotting import MatplotlibPlotSink


class TestPipelineConfig:
    """Tests for PipelineConfig validation"""

    def test_defaults(self):
        config = PipelineConfig()
        assert config.window == 3
        assert config.channels == (0, 5)
        assert config.header_lines == 2
        assert config.on_schema_error == 'abort'
        assert config.label_for(0) == 'foF2'
        assert config.label_for(5) == 'hmF2'

    @pytest.mark.parametrize('window', [0, 2, -3])
    def test_bad_window(self, window):
        with pytest.raises(ConfigError):
            PipelineConfig(window=window)

    def test_bad_policy(self):
        with pytest.raises(ConfigError, match='on_schema_error'):
            PipelineConfig(on_schema_error='ignore')

    def test_bad_header_lines(self):
        with pytest.raises(ConfigError):
            PipelineConfig(header_lines=-1)

    def test_channels_list_becomes_tuple(self):
        assert PipelineConfig(channels=[1, 2]).channels == (1, 2)


class TestFilterPipeline:
    """End-to-end runs with an in-memory sink"""

    def test_sorts_then_filters_each_channel(self, station_file, recording_sink):
        report = FilterPipeline(PipelineConfig(), recording_sink).run(station_file)

        assert report.ok
        assert report.record_count == 5
        assert report.source == station_file
        assert recording_sink.labels == ['foF2', 'hmF2']
        assert recording_sink.closed

        fof2 = report.result_for(0)
        # chronological: 23:45 (4.8), 11:00 (4.9), 11:15 (9.9), 11:30 (5.1), 11:45 (5.2)
        np.testing.assert_allclose(fof2.raw, [4.8, 4.9, 9.9, 5.1, 5.2])
        np.testing.assert_allclose(fof2.filtered, [4.8, 4.9, 5.1, 5.2, 5.2])
        assert fof2.changed == 2
        assert fof2.output == 'memory:foF2'

        hmf2 = report.result_for(5)
        # already monotonic once sorted
        np.testing.assert_allclose(hmf2.raw, [249.0, 250.0, 251.0, 252.0, 253.0])
        np.testing.assert_allclose(hmf2.filtered, hmf2.raw)

    def test_sink_receives_same_arrays_as_report(self, station_file, recording_sink):
        report = run_pipeline(station_file, PipelineConfig(channels=(0,)), recording_sink)
        raw, filtered, label = recording_sink.rendered[0]
        np.testing.assert_array_equal(raw, report.results[0].raw)
        np.testing.assert_array_equal(filtered, report.results[0].filtered)
        assert len(raw) == len(filtered)

    def test_load_returns_sorted_records(self, station_file, recording_sink):
        records = FilterPipeline(sink=recording_sink).load(station_file)
        keys = [chrono_key(r) for r in records]
        assert keys == sorted(keys)

    def test_bad_channel_does_not_block_others(self, station_file, recording_sink):
        config = PipelineConfig(channels=(0, 11, 5))
        report = run_pipeline(station_file, config, recording_sink)

        assert not report.ok
        assert [r.index for r in report.results] == [0, 5]
        assert len(report.failures) == 1
        failure = report.failures[0]
        assert failure.index == 11
        assert failure.error_type == 'ChannelIndexError'
        assert recording_sink.labels == ['foF2', 'hmF2']

    def test_sink_failure_is_local(self, station_file):
        sink = RecordingPlotSink(fail_on='foF2')
        report = run_pipeline(station_file, PipelineConfig(), sink)

        assert [f.label for f in report.failures] == ['foF2']
        assert report.failures[0].error_type == 'PlotSinkError'
        assert sink.labels == ['hmF2']

    def test_window_wider_than_batch(self, tmp_path, recording_sink):
        path = tmp_path / 'short.txt'
        path.write_text(make_station_text([
            ('2021.03.03', '11:00:00', 4.9, 250.0),
            ('2021.03.03', '10:00:00', 7.0, 240.0),
        ]))
        report = run_pipeline(path, PipelineConfig(window=5), recording_sink)

        fof2 = report.result_for(0)
        np.testing.assert_allclose(fof2.filtered, [7.0, 4.9])
        assert fof2.changed == 0

    def test_malformed_line_aborts_batch(self, tmp_path, recording_sink):
        path = tmp_path / 'bad.txt'
        path.write_text(HEADER + "\n\n" + make_line() + "2021.03.03 (062) 11:15:00 1 2.0\n")

        with pytest.raises(SchemaViolation):
            run_pipeline(path, PipelineConfig(), recording_sink)
        assert recording_sink.rendered == []
        assert recording_sink.closed

    def test_skip_policy_reports_skipped_lines(self, tmp_path, recording_sink):
        path = tmp_path / 'bad.txt'
        path.write_text(HEADER + "\n\n" + make_line()
                        + "2021.03.03 (062) 11:15:00 1 2.0\n"
                        + make_line(time='11:30:00'))

        report = run_pipeline(path, PipelineConfig(on_schema_error='skip'), recording_sink)

        assert report.record_count == 2
        assert report.skipped_lines == 1
        assert report.ok

    def test_missing_file(self, tmp_path, recording_sink):
        with pytest.raises(FileAccessError):
            run_pipeline(tmp_path / 'missing.txt', PipelineConfig(), recording_sink)
        assert recording_sink.closed

    def test_load_lines(self, station_text, recording_sink):
        records = FilterPipeline(sink=recording_sink).load_lines(station_text.splitlines())
        assert [r.time for r in records][:2] == ['23:45:00', '11:00:00']

    def test_default_sink_from_config(self, tmp_path, station_file):
        pipeline = FilterPipeline(PipelineConfig(output_dir=tmp_path / 'out'))
        assert isinstance(pipeline.sink, MatplotlibPlotSink)

    def test_report_serialises(self, station_file, recording_sink):
        data = run_pipeline(station_file, PipelineConfig(channels=(0, 42)),
                            recording_sink).to_dict()
        assert data['record_count'] == 5
        assert data['results'][0]['label'] == 'foF2'
        assert data['failures'][0]['index'] == 42

    def test_result_frame(self, station_file, recording_sink):
        frame = run_pipeline(station_file, PipelineConfig(channels=(0,)),
                             recording_sink).results[0].to_frame()
        assert list(frame.columns) == ['sample', 'raw', 'filtered']
        assert len(frame) == 5


class TestSampleStationFile:
    """The bundled example file: unsorted rows with spikes in foF2 and hmF2"""

    SAMPLE = Path(__file__).parent.parent / 'examples' / 'sample_station.txt'

    def test_spikes_removed(self, recording_sink):
        report = run_pipeline(self.SAMPLE, PipelineConfig(), recording_sink)

        assert report.ok
        assert report.record_count == 14

        fof2 = report.result_for(0)
        assert fof2.raw[0] == pytest.approx(5.800)       # 09:45 sorts first
        assert fof2.raw[3] == pytest.approx(9.825)       # 10:30 spike
        assert fof2.filtered[3] == pytest.approx(6.050)
        assert fof2.raw[11] == pytest.approx(2.950)      # 12:30 dropout
        assert fof2.filtered[11] == pytest.approx(6.250)
        assert 5.0 < fof2.filtered.min() and fof2.filtered.max() < 7.0

        hmf2 = report.result_for(5)
        assert hmf2.raw.max() == pytest.approx(348.6)
        assert hmf2.filtered.max() < 300.0


class TestRunLogging:
    """Startup banner written at the start of every run"""

    def test_banner_lists_versions(self, station_file, recording_sink, caplog):
        caplog.set_level(logging.INFO, logger='ionofilter')
        run_pipeline(station_file, PipelineConfig(channels=(0,)), recording_sink)

        assert 'iono-filter v' in caplog.text
        assert 'Record schema: 15-token-v1' in caplog.text
        assert 'median_filter 1.0' in caplog.text
