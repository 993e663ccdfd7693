"""YAML defaults file loading."""

from ec2_search.search_config import DEFAULT_SEARCH_DEFAULTS, SearchDefaults, load_search_defaults


def test_missing_file_uses_builtin_defaults(tmp_path):
    assert load_search_defaults(tmp_path / "absent.yaml") == DEFAULT_SEARCH_DEFAULTS
    assert DEFAULT_SEARCH_DEFAULTS == SearchDefaults(" ", "tag:Name", None, None)


def test_values_are_read(tmp_path):
    path = tmp_path / "ec2-search.yaml"
    path.write_text(
        'delimiter: ","\nfilter_type: instance-type\nprofile: prod\nregion: eu-west-1\n',
        encoding="utf-8",
    )

    defaults = load_search_defaults(path)

    assert defaults == SearchDefaults(
        delimiter=",",
        filter_type="instance-type",
        profile="prod",
        region="eu-west-1",
    )


def test_bad_values_fall_back(tmp_path):
    path = tmp_path / "ec2-search.yaml"
    path.write_text("delimiter: 3\nfilter_type: '  '\nprofile: [a, b]\nunknown: true\n", encoding="utf-8")

    defaults = load_search_defaults(path)

    assert defaults.delimiter == " "
    assert defaults.filter_type == "tag:Name"
    assert defaults.profile is None


def test_empty_delimiter_is_allowed(tmp_path):
    path = tmp_path / "ec2-search.yaml"
    path.write_text('delimiter: ""\n', encoding="utf-8")

    assert load_search_defaults(path).delimiter == ""


def test_non_mapping_document(tmp_path):
    path = tmp_path / "ec2-search.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    assert load_search_defaults(path) == DEFAULT_SEARCH_DEFAULTS


def test_empty_document(tmp_path):
    path = tmp_path / "ec2-search.yaml"
    path.write_text("", encoding="utf-8")

    assert load_search_defaults(path) == DEFAULT_SEARCH_DEFAULTS
