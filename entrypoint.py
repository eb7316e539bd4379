"""GitHub Action entrypoint: runs the HAR to OpenAPI pipeline and writes outputs."""

from __future__ import annotations

import os
import sys


def _env(name: str, default: str = "") -> str:
    """Read an environment variable (INPUT_* convention)."""
    return os.environ.get(name, default).strip()


def _write_output(name: str, value: str) -> None:
    """Append a key=value pair to $GITHUB_OUTPUT."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        with open(output_file, "a") as f:
            f.write(f"{name}={value}\n")


def _write_summary(markdown: str) -> None:
    """Append Markdown to $GITHUB_STEP_SUMMARY."""
    summary_file = os.environ.get("GITHUB_STEP_SUMMARY")
    if summary_file:
        with open(summary_file, "a") as f:
            f.write(markdown)


def main() -> int:
    # Import pipeline modules
    from har_openapi.config import ConfigError, load_settings
    from har_openapi.converter import convert_har
    from har_openapi.har_loader import CaptureError, load_har
    from har_openapi.oas_emitter import emit_json, emit_openapi, emit_yaml

    # 1. Read inputs
    try:
        settings = load_settings(
            _env("INPUT_HAR_FILE"),
            _env("INPUT_BASE_PATH"),
            output=_env("INPUT_OUTPUT") or None,
            fmt=_env("INPUT_FORMAT") or None,
            title=_env("INPUT_TITLE") or None,
            version=_env("INPUT_API_VERSION") or None,
            server_url=_env("INPUT_SERVER_URL") or None,
        )
    except ConfigError as e:
        print(f"::error::{e}")
        return 1

    # 2. Load and convert
    try:
        har = load_har(settings.har_file)
        endpoints, stats = convert_har(har, settings.base_path)
    except CaptureError as e:
        print(f"::error::Failed to read HAR: {e}")
        return 1

    print(f"Processed {stats.total_entries} entries, "
          f"{stats.unique_endpoints} unique endpoints")

    if not endpoints:
        print(f"::warning::No endpoints found under {settings.base_path}.")

    # 3. Emit OpenAPI spec
    spec = emit_openapi(endpoints, title=settings.title, version=settings.version,
                        server_url=settings.server_url)
    if settings.fmt == "json":
        spec_content = emit_json(spec)
    else:
        spec_content = emit_yaml(spec)

    try:
        os.makedirs(os.path.dirname(settings.output), exist_ok=True)
        with open(settings.output, "w", encoding="utf-8") as f:
            f.write(spec_content)
    except OSError as e:
        print(f"::error::Cannot write {settings.output}: {e}")
        return 1
    print(f"OpenAPI spec written to: {settings.output}")

    schema_count = len(spec["components"]["schemas"])

    # 4. Write outputs
    _write_output("spec-path", settings.output)
    _write_output("total-entries", str(stats.total_entries))
    _write_output("unique-endpoints", str(stats.unique_endpoints))
    _write_output("schemas", str(schema_count))

    # 5. Write step summary
    summary_lines = [
        "## HAR to OpenAPI Results\n\n",
        "| Metric | Count |\n",
        "|---|---|\n",
        f"| HAR entries | {stats.total_entries} |\n",
        f"| Skipped (base path mismatch) | {stats.skipped_prefix} |\n",
        f"| Skipped (static / non-XHR) | {stats.skipped_static} |\n",
        f"| **Unique endpoints** | **{stats.unique_endpoints}** |\n",
        f"| Schemas | {schema_count} |\n",
        "\n",
    ]

    if endpoints:
        summary_lines.append("<details>\n<summary>Endpoints</summary>\n\n")
        summary_lines.append("| Method | Path | Tag |\n")
        summary_lines.append("|---|---|---|\n")
        for ep in sorted(endpoints, key=lambda e: (e.template, e.method)):
            summary_lines.append(f"| `{ep.method}` | `{ep.template}` | {ep.tag} |\n")
        summary_lines.append("\n</details>\n")

    summary_lines.append(f"\nSpec written to `{settings.output}` ({settings.fmt})\n")
    _write_summary("".join(summary_lines))

    return 0


if __name__ == "__main__":
    sys.exit(main())
