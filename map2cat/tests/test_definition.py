import pytest

from map2cat.surveyor.definition import (
    GenerationConfig,
    RedshiftBounds,
    parse_bounds,
    read_config,
)
from map2cat.utils import ConfigValidationError

CONFIG_TEMPLATE = """
[input]
data_map_file_name = {map_file}
z_bounds = {z_bounds}
rand_seed = {rand_seed}
sigma_e = {sigma_e}

[output]
{output_key} = {output_file}
delimiter = {delimiter}
"""


def write_config(path, **kwargs):
    params = dict(
        map_file="maps.fits",
        z_bounds="0.5,0.6",
        rand_seed=42,
        sigma_e=0.3,
        output_key='catalogue_file_name',
        output_file="catalogue.dat",
        delimiter=",",
    )
    params.update(kwargs)

    path.write_text(CONFIG_TEMPLATE.format(**params), encoding='utf-8')

    return path


@pytest.mark.parametrize(
    "bounds_str,bounds",
    [
        ("0.5,0.6", (0.5, 0.6)),
        (" 0 , 2.5 ", (0., 2.5)),
        ("-1.,1e-3", (-1., 0.001)),
        ("0.1,,0.2", (0.1, 0.2)),
    ]
)
def test_parse_bounds(bounds_str, bounds):
    assert parse_bounds(bounds_str) == RedshiftBounds(*bounds), \
        "Incorrect bounds parsed."


@pytest.mark.parametrize(
    "bounds_str",
    [
        "0.1,0.1",
        "0.2,0.1",
        "0.1,0.2,0.3",
        "0.1",
        "",
        "low,high",
        "0.1,inf",
        "nan,0.2",
    ]
)
def test_parse_bounds_failure(bounds_str):
    with pytest.raises(ConfigValidationError):
        parse_bounds(bounds_str)


def test_read_config(tmp_path):

    config = read_config(write_config(tmp_path/"map2cat.ini"))

    assert config == GenerationConfig(
        map_file="maps.fits",
        z_min=0.5,
        z_max=0.6,
        random_seed=42,
        sigma_e=0.3,
        output_path="catalogue.dat",
        delimiter=",",
    ), "Incorrect generation parameters read from the configuration file."


def test_read_config_legacy_output_key(tmp_path):

    config = read_config(
        write_config(tmp_path/"map2cat.ini", output_key='catlogue_file_name')
    )

    assert config.output_path == "catalogue.dat", \
        "Legacy catalogue output key is not recognised."


@pytest.mark.parametrize(
    "delimiter,value",
    [
        (r"\t", "\t"),
        (";", ";"),
        ("|", "|"),
        ("\N{SECTION SIGN}", "\N{SECTION SIGN}"),
        ("\N{RIGHTWARDS ARROW}", "\N{RIGHTWARDS ARROW}"),
        (r"\x7c", "|"),
    ]
)
def test_read_config_delimiter(tmp_path, delimiter, value):
    assert read_config(
        write_config(tmp_path/"map2cat.ini", delimiter=delimiter)
    ).delimiter == value, "Incorrect delimiter read."


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(z_bounds="0.6,0.5"),
        dict(z_bounds="0.1,0.2,0.3"),
        dict(rand_seed=-1),
        dict(rand_seed=1.5),
        dict(sigma_e=-0.1),
        dict(sigma_e="nan"),
        dict(sigma_e="wide"),
        dict(output_key='output_file_name'),
        dict(delimiter=""),
        dict(delimiter="\\"),
    ]
)
def test_read_config_failure(tmp_path, kwargs):
    with pytest.raises(ConfigValidationError):
        read_config(write_config(tmp_path/"map2cat.ini", **kwargs))


def test_read_config_missing_section(tmp_path):

    config_file = tmp_path/"map2cat.ini"
    config_file.write_text("[input]\nz_bounds = 0.5,0.6\n")

    with pytest.raises(ConfigValidationError):
        read_config(config_file)


def test_read_config_missing_file(tmp_path):
    with pytest.raises(ConfigValidationError):
        read_config(tmp_path/"absent.ini")


def test_generation_config_is_immutable():

    config = GenerationConfig("maps.fits", 0.5, 0.6, 42, 0.3, "cat.dat", ",")

    with pytest.raises(AttributeError):
        config.sigma_e = 0.
