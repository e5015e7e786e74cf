# vcheck

A library of building blocks for working with vulnerability data. It parses
CPE names, builds filter expressions for offline CPE lookups, keeps a record of
locally synced indices, and picks CVSS scores out of NVD 2.0 records.

## Install

    pip install .

To run the test suite, install the `test` extra and run `pytest`:

    pip install ".[test]"
    pytest

## Modules

### `vcheck.cpeutils`

- `CPE` is a dataclass with the eleven CPE attributes: `part`, `vendor`,
  `product`, `version`, `update`, `edition`, `language`, `software_edition`,
  `target_software`, `target_hardware` and `other`.
- `CPEVulnerabilities` is a `CPE` with two more fields: `cpe23_uri` and `cves`.
- `compare_versions(a, b)` returns -1, 0 or 1. It understands `N.x`
  major-only patterns, dotted numeric versions, and semantic-style versions
  with pre-release and build parts. It raises `VersionError` when neither
  version form applies.
- `get_uint64_from_version(version)` packs up to eight dotted numeric fields
  into a 64-bit integer, one byte per field. For example, `"1.2.3"` gives
  `0x0102030000000000`. `compare_versions_by_uint64(a, b)` compares two
  versions in that packed form.
- `is_parseable_version(version)` tells whether a version is dotted numeric or
  semantic-style.
- `unquote(value)` removes the escaping of `.`, `-` and `_` from a CPE
  attribute value. `*` and `-` are returned unchanged, and an empty value
  becomes `*`.
- `process(cpe, entries)` collects the distinct CVEs of the entries whose
  version equals the CPE's version. If the CPE's version cannot be parsed, it
  takes the CVEs of every entry.
- Three list helpers are also provided: `remove_duplicates_unordered`,
  `remove_cve_entry` and `remove_cve_entries`.

### `vcheck.cpeuri`

- `to_struct(s)` parses either a CPE 2.3 formatted string or a CPE 2.2 URI.
  It raises `CPEParseError` when the string has neither form, or when both
  vendor and product are `*`.
- `get_cpe_struct_from_string(s)` parses either form and fills empty
  attributes with `*`.
- `unbind_cpe_formatted_string(s)` and `unbind_cpe_uri_string(uri)` parse one
  specific form. The URI parser supports packed editions (`~...~...`).
- `is_cpe_formatted_string(s)` and `is_cpe_uri_string(s)` are quick shape
  checks.
- `convert_empty_to_any(cpe)` returns a copy of the CPE with every empty
  attribute set to `*`.

### `vcheck.cpeoffline`

- `query(cpe)` builds a filter expression such as
  `(.vendor == "vendor" or .vendor == "*") and ...`. The expression has one
  condition for each attribute that is not a wildcard. The version is matched
  only when it cannot be parsed as a version.
- `build_cpe_query(cpe, query_version)` and `add_condition(field, value)` are
  the parts that `query` is built from.
- A CPE whose vendor and product are both `*` raises `QueryError`.

### `vcheck.config`

This module stores settings in `~/.config/vulncheck/vulncheck.yaml`. The file
is created with owner-only permissions.

- `Config` holds two settings: `token` and `indices_dir`. Use `load_config`
  and `save_config` to read and write it. Both raise `ConfigError` on failure.
- `token()` returns the token. A well-formed `VC_TOKEN` environment variable
  comes first, then the saved token, otherwise an empty string.
- Related functions: `has_token`, `token_from_env`, `save_token` and
  `remove_token`. The last two replace the whole configuration.
- `valid_token(token)` checks for the `vulncheck_` prefix and a length of 74
  characters.
- `indices_dir()` returns the configured indices directory, or
  `~/.config/vulncheck/indices`. It creates the directory if it is missing.
  `set_indices_dir(directory)` changes it.
- `config_dir()`, `has_config()` and `is_ci()` are also provided. `is_ci()`
  checks the `CI`, `BUILD_NUMBER` and `RUN_ID` variables.

### `vcheck.cache`

- `IndexInfo` holds `name`, `last_sync`, `size` and `last_updated`.
- `InfoFile` holds a list of them and has two methods: `index_exists(name)`
  and `get_index(name)`.
- `indices()` reads `sync_info.yaml` from the indices directory. If the file
  does not exist, it returns an empty `InfoFile`.
- `save_indices(info)` writes the file.
- `purge_indices()` deletes the indices directory and then recreates it
  empty.
- Failures raise `CacheError`.

### `vcheck.help`

- `auth_help()` returns setup guidance for providing a token. The text depends
  on the environment: GitHub Actions, another CI service, or a local shell.

### `vcheck.scores`

- `load_sbom_refs(input_file)` reads a CycloneDX JSON file. It returns an
  `InputSbomRef(sbom_ref, purl)` for each component that has both a string
  `bom-ref` and a string `purl`. It raises `SbomError` when the file cannot be
  read or parsed.
- `base_score(item)` picks the CVSS base score from an NVD 2.0 record given as
  a mapping. It tries v3.1, then v3.0, then v2.
- `temporal_score(item)` picks the CVSS temporal score the same way, searching
  the v3.1, v3.0 and v2 sources in turn.
- Both return `"n/a"` when no score is present.
- `format_single_decimal(value)` formats a score with one decimal place, at
  single precision.

## Example

```python
from vcheck.cpeuri import to_struct
from vcheck.cpeoffline import query

cpe = to_struct("cpe:2.3:a:vendor:product:1.0:*:*:*:*:*:*:*")
print(query(cpe))
# (.vendor == "vendor" or .vendor == "*") and (.product == "product" or .product == "*")
```

## What this package does not do

- It is a library only. It has no command-line tool.
- It does not talk to any vulnerability API.
- It does not download or unpack indices. `vcheck.cache` only reads, writes
  and purges the local record of them.
- It does not search index files.
- It does not generate SBOMs from directories or images.
- It does not look up package URLs or CVE metadata online.