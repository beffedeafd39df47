"""Run-time configuration assembled from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .env_vars import EnvVarNames, print_report_titles_info
from .fonts import print_fonts_info
from .generator import DEFAULT_PDF_META_NAME, DEFAULT_REPORT_TITLE
from .input_file_type import InputFileType
from .run_utils import print_copyright


@dataclass
class Config:
    """Settings that control which files are converted and how reports look."""

    working_dir: Path
    show_novulns_msg: bool = True
    file_types_to_process: dict[InputFileType, bool] = field(
        default_factory=lambda: {InputFileType.JSON: True, InputFileType.XML: True}
    )
    show_oss_licenses: bool = False
    show_components: bool = True
    report_title: str | None = None
    pdf_meta_name: str | None = None

    @classmethod
    def build(cls) -> Config:
        """Build a configuration from the current directory and environment variables.

        Prints start-up information; raises OSError if the current directory
        cannot be determined.
        """
        working_dir = Path(os.getcwd())
        show_novulns_msg = EnvVarNames.NO_VULNS_MSG.is_on_or_unset()
        process_json = EnvVarNames.PROCESS_JSON.is_on_or_unset()
        process_xml = EnvVarNames.PROCESS_XML.is_on_or_unset()
        show_oss_licenses = EnvVarNames.SHOW_OSS_LICENSES.is_on()
        show_components = EnvVarNames.SHOW_COMPONENTS.is_on_or_unset()

        if EnvVarNames.VERSION_INFO.is_on():
            print_copyright()

        if not show_oss_licenses:
            print_fonts_info()
            print_report_titles_info()

        if not (process_json or process_xml):
            print(
                "**** WARNING: we cannot have both json and xml deactivated. "
                "defaulting to json processing"
            )
            process_json = True

        return cls(
            working_dir=working_dir,
            show_novulns_msg=show_novulns_msg,
            file_types_to_process={
                InputFileType.JSON: process_json,
                InputFileType.XML: process_xml,
            },
            show_oss_licenses=show_oss_licenses,
            show_components=show_components,
            report_title=EnvVarNames.REPORT_TITLE.get_value(),
            pdf_meta_name=EnvVarNames.PDF_NAME.get_value(),
        )

    @classmethod
    def default(cls) -> Config:
        """Return the out-of-the-box configuration, ignoring the environment."""
        return cls(
            working_dir=Path(os.getcwd()),
            show_novulns_msg=True,
            file_types_to_process={InputFileType.JSON: True, InputFileType.XML: True},
            show_oss_licenses=True,
            show_components=True,
            report_title=DEFAULT_REPORT_TITLE,
            pdf_meta_name=DEFAULT_PDF_META_NAME,
        )