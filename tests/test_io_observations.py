"""
Tests for the .obs observation file format.
"""

import logging

import pytest

from hmmkit.exceptions import ObservationFormatError
from hmmkit.io import format_observations, load_observations, parse_observations, save_observations


SENTENCES_OBS = """\
2
3
kids do play
2
robots play
"""


class TestParseObservations:

    def test_sequences(self):
        assert parse_observations(SENTENCES_OBS) == [["kids", "do", "play"], ["robots", "play"]]

    def test_zero_sequences(self):
        assert parse_observations("0\n") == []

    def test_zero_length_sequence_has_no_symbol_line(self):
        assert parse_observations("2\n0\n1\nkids\n") == [[], ["kids"]]

    def test_blank_lines_are_skipped(self):
        assert parse_observations("\n1\n\n2\n  Walk   Shop \n\n") == [["Walk", "Shop"]]

    def test_length_mismatch_warns(self, caplog):
        logging.getLogger("hmmkit").propagate = True
        try:
            with caplog.at_level(logging.WARNING, logger="hmmkit"):
                sequences = parse_observations("1\n3\nWalk Shop\n", source="walks.obs")
        finally:
            logging.getLogger("hmmkit").propagate = False

        assert sequences == [["Walk", "Shop"]]
        assert "declares 3 symbols but lists 2" in caplog.text


class TestParseObservationErrors:

    def test_empty_text(self):
        with pytest.raises(ObservationFormatError, match="unexpected end of file"):
            parse_observations("")

    def test_bad_count(self):
        with pytest.raises(ObservationFormatError) as exc_info:
            parse_observations("two\n", source="bad.obs")
        assert str(exc_info.value).startswith("bad.obs:1: ")

    def test_negative_count(self):
        with pytest.raises(ObservationFormatError, match="non-negative sequence count"):
            parse_observations("-1\n")

    def test_multiple_values_on_count_line(self):
        with pytest.raises(ObservationFormatError, match="single non-negative"):
            parse_observations("1 2\n")

    def test_missing_sequence(self):
        with pytest.raises(ObservationFormatError, match="unexpected end of file"):
            parse_observations("2\n1\nWalk\n")

    def test_missing_symbol_line(self):
        with pytest.raises(ObservationFormatError, match="symbols of sequence 1"):
            parse_observations("1\n2\n")

    def test_bad_length_line(self):
        with pytest.raises(ObservationFormatError) as exc_info:
            parse_observations("1\nWalk Shop\n")
        assert exc_info.value.line == 2


class TestObservationFiles:

    def test_format(self):
        assert format_observations([["kids", "do", "play"], ["robots", "play"]]) == SENTENCES_OBS

    def test_format_empty_sequence(self):
        assert format_observations([["Walk"], []]) == "2\n1\nWalk\n0\n"

    def test_save_and_load(self, temp_dir):
        sequences = [["Walk", "Shop", "Shop"], ["Shop"]]
        path = save_observations(sequences, temp_dir / "walks.obs")
        assert load_observations(path) == sequences

    def test_missing_file(self, temp_dir):
        with pytest.raises(ObservationFormatError, match="cannot read file"):
            load_observations(temp_dir / "missing.obs")
