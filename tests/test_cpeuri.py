import pytest

from vcheck.cpeuri import (
    CPEParseError,
    convert_empty_to_any,
    get_cpe_struct_from_string,
    is_cpe_formatted_string,
    is_cpe_uri_string,
    to_struct,
    unbind_cpe_formatted_string,
    unbind_cpe_uri_string,
)
from vcheck.cpeutils import CPE

FULL_FS = "cpe:2.3:a:vendor:product:version:update:edition:lang:sw_edition:target_sw:target_hw:other"

FULL_CPE = CPE(
    part="a",
    vendor="vendor",
    product="product",
    version="version",
    update="update",
    edition="edition",
    language="lang",
    software_edition="sw_edition",
    target_software="target_sw",
    target_hardware="target_hw",
    other="other",
)


def test_to_struct_valid_formatted_string():
    assert to_struct(FULL_FS) == FULL_CPE


def test_to_struct_not_enough_components():
    with pytest.raises(CPEParseError, match="invalid CPE string"):
        to_struct("cpe:2.3:a:vendor:product")


def test_to_struct_rejects_wildcard_vendor_and_product():
    with pytest.raises(CPEParseError, match="cannot be"):
        to_struct("cpe:2.3:a:*:*:1.0:*:*:*:*:*:*:*")


def test_to_struct_uri_fills_any():
    result = to_struct("cpe:/a:vendor:product:1.0")
    assert result == CPE(
        part="a",
        vendor="vendor",
        product="product",
        version="1\\.0",
        update="*",
        edition="*",
        language="*",
        software_edition="*",
        target_software="*",
        target_hardware="*",
        other="*",
    )


@pytest.mark.parametrize(
    "text, expected",
    [
        ("cpe:/a:vendor:product:version", True),
        ("invalid:/a:vendor:product:version", False),
        ("cpe:/a:vendor:product", False),
        ("cpe:/a:vend\u25a1r:product:version", False),
    ],
)
def test_is_cpe_uri_string(text, expected):
    assert is_cpe_uri_string(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        (FULL_FS, True),
        ("invalid:2.3:a:vendor:product:version:update:edition:lang:sw_edition:target_sw:target_hw:other", False),
        ("cpe:2.3:a:vendor:product", False),
        ("cpe:2.3:a:vend\u25a1r:product:version:update:edition:lang:sw_edition:target_sw:target_hw:other", False),
    ],
)
def test_is_cpe_formatted_string(text, expected):
    assert is_cpe_formatted_string(text) is expected


def test_unbind_formatted_string_full():
    assert unbind_cpe_formatted_string(FULL_FS) == FULL_CPE


def test_unbind_formatted_string_missing_components():
    assert unbind_cpe_formatted_string("cpe:2.3:a:vendor:product") == CPE(
        part="a",
        vendor="vendor",
        product="product",
        version="*",
        update="*",
        edition="*",
        language="*",
        software_edition="*",
        target_software="*",
        target_hardware="*",
        other="*",
    )


def test_unbind_formatted_string_lowercases_and_quotes():
    result = unbind_cpe_formatted_string("cpe:2.3:a:Vendor:product:1.0:*:*:*:*:*:*:-")
    assert result.vendor == "vendor"
    assert result.version == "1\\.0"
    assert result.update == "*"
    assert result.other == "-"


def test_unbind_formatted_string_escaped_colon():
    result = unbind_cpe_formatted_string("cpe:2.3:a:ven\\:dor:product:*:*:*:*:*:*:*:*")
    assert result.vendor == "ven\\:dor"
    assert result.product == "product"


def test_unbind_formatted_string_embedded_asterisk():
    with pytest.raises(CPEParseError, match="asterisk"):
        unbind_cpe_formatted_string("cpe:2.3:a:vendor:pro*duct:*:*:*:*:*:*:*:*")


def test_unbind_formatted_string_question_marks():
    result = unbind_cpe_formatted_string("cpe:2.3:a:?vendor:product?:*:*:*:*:*:*:*:*")
    assert result.vendor == "?vendor"
    assert result.product == "product?"
    with pytest.raises(CPEParseError):
        unbind_cpe_formatted_string("cpe:2.3:a:ven?dor:product:*:*:*:*:*:*:*:*")


def test_unbind_formatted_string_trailing_escape():
    with pytest.raises(CPEParseError, match="escaping"):
        unbind_cpe_formatted_string("cpe:2.3:a:vendor:product\\")


def test_unbind_uri_string_valid():
    assert unbind_cpe_uri_string("cpe:/a:vendor:product:version:update") == CPE(
        part="a",
        vendor="vendor",
        product="product",
        version="version",
        update="update",
        edition="*",
        language="*",
        software_edition="",
        target_software="",
        target_hardware="",
        other="",
    )


def test_unbind_uri_string_non_ascii():
    with pytest.raises(CPEParseError):
        unbind_cpe_uri_string("cpe:/a:vend\u25a1r:product:version")


def test_unbind_uri_string_packed_edition():
    result = unbind_cpe_uri_string("cpe:/a:vendor:product:1.0:update:~ed~swed~tsw~thw~oth:en")
    assert result.edition == "ed"
    assert result.software_edition == "swed"
    assert result.target_software == "tsw"
    assert result.target_hardware == "thw"
    assert result.other == "oth"
    assert result.language == "en"
    assert result.version == "1\\.0"


def test_unbind_uri_string_packed_empty_components():
    result = unbind_cpe_uri_string("cpe:/a:vendor:product:1:u:~~~~~")
    assert result.edition == "*"
    assert result.other == "*"


def test_unbind_uri_string_packed_too_few_components():
    with pytest.raises(CPEParseError, match="not enough components"):
        unbind_cpe_uri_string("cpe:/a:vendor:product:1:u:~a~b")


def test_unbind_uri_string_lowercases():
    result = unbind_cpe_uri_string("cpe:/a:Vendor:Product")
    assert (result.vendor, result.product) == ("vendor", "product")


@pytest.mark.parametrize(
    "product, expected",
    [
        ("foo%21bar", "foo\\!bar"),
        ("%02foo", "*foo"),
        ("foo%01", "foo?"),
        ("foo~bar", "foo\\~bar"),
    ],
)
def test_unbind_uri_string_percent_decoding(product, expected):
    assert unbind_cpe_uri_string(f"cpe:/a:vendor:{product}").product == expected


@pytest.mark.parametrize("product", ["foo%02bar", "foo%zzbar", "foo%2"])
def test_unbind_uri_string_bad_percent_encoding(product):
    with pytest.raises(CPEParseError):
        unbind_cpe_uri_string(f"cpe:/a:vendor:{product}")


def test_get_cpe_struct_unrecognized():
    with pytest.raises(CPEParseError, match="unrecognized"):
        get_cpe_struct_from_string("not a cpe")


def test_convert_empty_to_any_returns_copy():
    original = CPE(vendor="v", product="")
    converted = convert_empty_to_any(original)
    assert converted.vendor == "v"
    assert converted.product == "*"
    assert converted.other == "*"
    assert original.product == ""