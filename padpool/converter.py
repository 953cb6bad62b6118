from typing import List, Tuple

from pydantic import ValidationError

from padpool.errors import KeyFormatError
from padpool.models.dc_models import KeyFileModel

RECONSTRUCTED_FILE_STEM = "reconstructed_file"


class KeyFileConverter:
    """This class is used to convert key files between the model and their JSON text."""

    @staticmethod
    def split_file_name(file_name: str) -> Tuple[str, str]:
        """Split a file name into stem and extension (text after the last dot)

        Args:
            file_name (str): Name of the original file

        Returns:
            Tuple[str, str]: Stem and extension, extension is empty when there is no dot
        """
        if "." not in file_name:
            return file_name, ""
        stem, extension = file_name.rsplit(".", 1)
        return stem, extension

    def key_file_name(self, file_name: str) -> str:
        stem, _ = self.split_file_name(file_name)
        return f"{stem}_key.json"

    @staticmethod
    def reconstructed_file_name(file_extension: str) -> str:
        if not file_extension:
            return RECONSTRUCTED_FILE_STEM
        return f"{RECONSTRUCTED_FILE_STEM}.{file_extension}"

    def build_key(self, pool_date: str, file_name: str, positions: List[int]) -> KeyFileModel:
        _, extension = self.split_file_name(file_name)
        return KeyFileModel(date=pool_date, file_extension=extension, positions=positions)

    @staticmethod
    def key_to_json(key: KeyFileModel) -> str:
        """Serialize the key with its wire field names (date, fileExtension, positions)"""
        return key.model_dump_json(by_alias=True)

    @staticmethod
    def json_to_key(text: str | bytes) -> KeyFileModel:
        """Parse key JSON text

        Args:
            text (str | bytes): UTF-8 JSON text of a key file

        Raises:
            KeyFormatError: The text is not a valid key file

        Returns:
            KeyFileModel: Parsed key
        """
        try:
            return KeyFileModel.model_validate_json(text)
        except ValidationError as e:
            raise KeyFormatError(str(e)) from e
