"""Tests for Data Converter."""

import json

import pytest
import toml
import yaml

from formatbridge.converter.converter import (
    ConversionFormat,
    ConversionRequest,
    DataConverter,
    convert,
)
from formatbridge.converter.errors import (
    ConversionError,
    NotASequenceError,
    ParseError,
    SerializeError,
)

SAMPLE = {
    "int": 1,
    "float": 1.5,
    "whole_float": 3.0,
    "str": "1",
    "bool": True,
    "list": [1, "two", 3.0],
    "nested": {"k": "v", "empty": []},
}

TOML_SAMPLE = {
    "int": 1,
    "float": 1.5,
    "str": "1",
    "bool": True,
    "list": [1, 2, 3],
    "nested": {"k": "v"},
}


@pytest.fixture
def converter():
    return DataConverter()


class TestConversionFormat:
    """Test format tags."""

    def test_parse(self):
        """Test known tags parse."""
        assert ConversionFormat.parse("json") is ConversionFormat.JSON
        assert ConversionFormat.parse("ron") is ConversionFormat.RON

    @pytest.mark.parametrize("tag", ["JSON", "Yaml", "xml", "", " csv"])
    def test_parse_rejects_unknown(self, tag):
        """Test tags are exact lowercase identifiers."""
        with pytest.raises(ValueError):
            ConversionFormat.parse(tag)

    def test_csv_options(self):
        """Test only CSV input uses the CSV options."""
        assert ConversionFormat.CSV.uses_csv_options is True
        assert ConversionFormat.JSON.uses_csv_options is False


class TestSameFormatRoundTrip:
    """Test parse(serialize(v, F), F) == v."""

    @pytest.mark.parametrize(
        "format",
        [ConversionFormat.JSON, ConversionFormat.YAML, ConversionFormat.RON],
    )
    def test_round_trip(self, converter, format):
        """Test scalar kinds survive exactly."""
        text = converter.convert(SAMPLE, format)
        parsed = converter.parse(text, format)

        assert parsed == SAMPLE
        assert type(parsed["whole_float"]) is float
        assert type(parsed["str"]) is str

    def test_toml_round_trip(self, converter):
        """Test TOML round trip."""
        text = converter.convert(TOML_SAMPLE, ConversionFormat.TOML)
        assert converter.parse(text, ConversionFormat.TOML) == TOML_SAMPLE

    def test_does_not_mutate(self, converter):
        """Test serialization leaves the value untouched."""
        value = json.loads(json.dumps(SAMPLE))
        for format in (ConversionFormat.JSON, ConversionFormat.YAML, ConversionFormat.RON):
            converter.convert(value, format)

        assert value == SAMPLE


class TestCrossFormat:
    """Test conversions between formats."""

    def test_json_to_yaml(self, converter):
        """Test JSON to YAML keeps key order."""
        request = ConversionRequest(
            raw_text='{"name": "Ann", "tags": ["a", "b"]}',
            source_format=ConversionFormat.JSON,
            target_format=ConversionFormat.YAML,
        )

        assert converter.convert_text(request) == "name: Ann\ntags:\n- a\n- b\n"

    def test_json_to_toml(self, converter):
        """Test JSON to TOML."""
        request = ConversionRequest(
            raw_text='{"title": "x", "owner": {"name": "Ann"}}',
            source_format=ConversionFormat.JSON,
            target_format=ConversionFormat.TOML,
        )

        result = converter.convert_text(request)
        assert toml.loads(result) == {"title": "x", "owner": {"name": "Ann"}}

    def test_yaml_to_ron(self, converter):
        """Test YAML to RON."""
        request = ConversionRequest(
            raw_text="name: Ann\nage: 3\n",
            source_format=ConversionFormat.YAML,
            target_format=ConversionFormat.RON,
        )

        assert converter.convert_text(request) == '{\n    "name": "Ann",\n    "age": 3,\n}'

    def test_ron_to_json(self, converter):
        """Test RON-specific values are lowered for JSON."""
        request = ConversionRequest(
            raw_text="Config(name: \"x\", mode: Fast, initial: 'c', size: Some(3), pair: (1, 2))",
            source_format=ConversionFormat.RON,
            target_format=ConversionFormat.JSON,
        )

        result = json.loads(converter.convert_text(request))
        assert result == {"name": "x", "mode": "Fast", "initial": "c", "size": 3, "pair": [1, 2]}

    def test_ron_map_keys_to_json(self, converter):
        """Test enum-variant and char map keys become string keys."""
        request = ConversionRequest(
            raw_text="{A: 1, 'b': 2}",
            source_format=ConversionFormat.RON,
            target_format=ConversionFormat.JSON,
        )

        assert json.loads(converter.convert_text(request)) == {"A": 1, "b": 2}

    def test_ron_map_keys_to_yaml(self, converter):
        """Test enum-variant map keys are written as plain YAML keys."""
        request = ConversionRequest(
            raw_text="{A: 1}",
            source_format=ConversionFormat.RON,
            target_format=ConversionFormat.YAML,
        )

        assert converter.convert_text(request) == "A: 1\n"

    def test_toml_dates_to_json(self, converter):
        """Test TOML dates become ISO strings in JSON."""
        request = ConversionRequest(
            raw_text="when = 1979-05-27\n",
            source_format=ConversionFormat.TOML,
            target_format=ConversionFormat.JSON,
        )

        assert json.loads(converter.convert_text(request)) == {"when": "1979-05-27"}

    def test_csv_to_json(self, converter):
        """Test CSV records become objects."""
        request = ConversionRequest(
            raw_text="a,b\n1,2\n",
            source_format=ConversionFormat.CSV,
            target_format=ConversionFormat.JSON,
        )

        assert json.loads(converter.convert_text(request)) == [{"a": "1", "b": "2"}]

    def test_csv_without_header_to_yaml(self, converter):
        """Test CSV rows become lists when there is no header."""
        request = ConversionRequest(
            raw_text="a,b\n1\n",
            source_format=ConversionFormat.CSV,
            target_format=ConversionFormat.YAML,
            csv_has_header=False,
        )

        assert yaml.safe_load(converter.convert_text(request)) == [["a", "b"], ["1"]]


class TestCsvOutput:
    """Test writing CSV."""

    def test_table(self, converter):
        """Test string records are written with a header row."""
        value = [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]
        assert converter.convert(value, ConversionFormat.CSV) == "a,b\n1,2\n3,4\n"

    def test_csv_round_trip(self, converter):
        """Test CSV to CSV keeps the table."""
        request = ConversionRequest(
            raw_text='a,b\n1,"x, y"\n',
            source_format=ConversionFormat.CSV,
            target_format=ConversionFormat.CSV,
        )

        assert converter.convert_text(request) == 'a,b\n1,"x, y"\n'

    def test_rows_of_scalars(self, converter):
        """Test non-table arrays give one record per element."""
        value = [[1, "x", True, None], [2.5], "solo"]
        assert converter.convert(value, ConversionFormat.CSV) == "1,x,true,\n2.5\nsolo\n"

    def test_records_with_numbers(self, converter):
        """Test objects with non-string fields are written without a header."""
        value = [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]
        assert converter.convert(value, ConversionFormat.CSV) == "1,x\n2,y\n"

    def test_ron_structs_to_csv(self, converter):
        """Test anonymous RON structs form a table."""
        request = ConversionRequest(
            raw_text='[(name: "a", v: "1"), (name: "b", v: "2")]',
            source_format=ConversionFormat.RON,
            target_format=ConversionFormat.CSV,
        )

        assert converter.convert_text(request) == "name,v\na,1\nb,2\n"

    def test_nested_cell(self, converter):
        """Test nested containers cannot become cells."""
        with pytest.raises(SerializeError) as exc_info:
            converter.convert([[{"a": 1}]], ConversionFormat.CSV)

        assert exc_info.value.format == "csv"

    def test_toml_mapping_root(self, converter):
        """Test a TOML document cannot become CSV."""
        request = ConversionRequest(
            raw_text='title = "x"\n',
            source_format=ConversionFormat.TOML,
            target_format=ConversionFormat.CSV,
        )

        with pytest.raises(NotASequenceError):
            converter.convert_text(request)

    @pytest.mark.parametrize("text", ['"just text"', "42", "null", '{"a": "1"}'])
    def test_non_sequence_json_root(self, converter, text):
        """Test scalar and object roots fail without crashing."""
        request = ConversionRequest(
            raw_text=text,
            source_format=ConversionFormat.JSON,
            target_format=ConversionFormat.CSV,
        )

        with pytest.raises(NotASequenceError):
            converter.convert_text(request)


class TestErrors:
    """Test error reporting."""

    def test_invalid_json(self, converter):
        """Test malformed JSON."""
        with pytest.raises(ParseError) as exc_info:
            converter.parse("{not json", ConversionFormat.JSON)

        assert exc_info.value.format == "json"
        assert str(exc_info.value).startswith("Failed to parse json:")

    def test_invalid_yaml(self, converter):
        """Test malformed YAML."""
        with pytest.raises(ParseError):
            converter.parse("a: [1, 2", ConversionFormat.YAML)

    def test_invalid_toml(self, converter):
        """Test malformed TOML."""
        with pytest.raises(ParseError):
            converter.parse("title = ", ConversionFormat.TOML)

    def test_csv_length_mismatch(self, converter):
        """Test CSV errors come through as ParseError."""
        with pytest.raises(ParseError):
            converter.parse("a,b\n1\n", ConversionFormat.CSV)

    def test_toml_needs_table_root(self, converter):
        """Test arrays cannot be a TOML document."""
        with pytest.raises(SerializeError) as exc_info:
            converter.convert([1, 2], ConversionFormat.TOML)

        assert exc_info.value.format == "toml"

    def test_toml_rejects_null(self, converter):
        """Test null values have no TOML form."""
        with pytest.raises(SerializeError):
            converter.convert({"a": {"b": None}}, ConversionFormat.TOML)

    def test_toml_rejects_null_inside_ron_values(self, converter):
        """Test nulls wrapped in Some or tuples are not dropped or stringified."""
        request = ConversionRequest(
            raw_text="(a: 1, b: Some(()), c: (1, ()))",
            source_format=ConversionFormat.RON,
            target_format=ConversionFormat.TOML,
        )

        with pytest.raises(SerializeError) as exc_info:
            converter.convert_text(request)

        assert exc_info.value.format == "toml"

    def test_named_struct_to_toml(self, converter):
        """Test a named RON struct root is written as a TOML table."""
        request = ConversionRequest(
            raw_text='Config(name: "x", size: Some(3))',
            source_format=ConversionFormat.RON,
            target_format=ConversionFormat.TOML,
        )

        assert toml.loads(converter.convert_text(request)) == {"name": "x", "size": 3}

    def test_errors_are_value_errors(self):
        """Test every conversion error is a ValueError."""
        for error_type in (ParseError, SerializeError, NotASequenceError):
            assert issubclass(error_type, ConversionError)
            assert issubclass(error_type, ValueError)


class TestHelpers:
    """Test query, minify and file helpers."""

    def test_query(self, converter):
        """Test JMESPath queries."""
        data = {"users": [{"name": "Ann"}, {"name": "Bob"}]}
        assert converter.query(data, "users[].name") == ["Ann", "Bob"]

    def test_invalid_query(self, converter):
        """Test invalid JMESPath expressions."""
        with pytest.raises(ValueError):
            converter.query({}, "users[")

    def test_minify_json(self, converter):
        """Test minified output."""
        assert converter.minify_json({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_indent(self):
        """Test the converter's indent setting."""
        assert DataConverter(indent=4).convert({"a": 1}, ConversionFormat.JSON) == '{\n    "a": 1\n}'

    def test_load_file_detects_format(self, converter, tmp_path):
        """Test format auto-detection from the extension."""
        path = tmp_path / "config.yml"
        path.write_text("a: 1\n")

        assert converter.load_file(path) == {"a": 1}

    def test_load_file_unknown_extension(self, converter, tmp_path):
        """Test unknown extensions need an explicit format."""
        path = tmp_path / "config.txt"
        path.write_text("a: 1\n")

        with pytest.raises(ValueError):
            converter.load_file(path)

        assert converter.load_file(path, format=ConversionFormat.YAML) == {"a": 1}

    def test_load_file_missing(self, converter, tmp_path):
        """Test missing files."""
        with pytest.raises(FileNotFoundError):
            converter.load_file(tmp_path / "missing.json")

    def test_convert_file(self, converter, tmp_path):
        """Test file to file conversion."""
        input_path = tmp_path / "people.csv"
        input_path.write_text("name,city\nAnn,Oslo\n")
        output_path = tmp_path / "people.json"

        converter.convert_file(input_path, output_path, ConversionFormat.JSON)

        assert json.loads(output_path.read_text()) == [{"name": "Ann", "city": "Oslo"}]

    def test_module_convert(self):
        """Test the module-level convert function."""
        request = ConversionRequest("[1, 2]", ConversionFormat.JSON, ConversionFormat.CSV)
        assert convert(request) == "1\n2\n"
