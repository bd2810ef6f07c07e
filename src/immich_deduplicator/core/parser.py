"""Filename parsing module for recognizing burst sequences."""

import re
from pathlib import PurePosixPath


class FilenameParser:
    """Parses filenames to extract components for duplicate classification."""

    # Optional prefix followed by the trailing run of digits
    TRAILING_NUMBER_PATTERN = re.compile(r"^(.*?)(\d+)\Z", re.DOTALL)

    def split_filename(self, filename: str) -> tuple[str, str]:
        """
        Split a filename into its stem and extension.

        Args:
            filename: The filename to split

        Returns:
            Tuple of (stem, extension); the extension is lower-case without the dot

        Example:
            >>> parser = FilenameParser()
            >>> parser.split_filename("PXL_20230725_094339303.JPG")
            ('PXL_20230725_094339303', 'jpg')
        """
        path = PurePosixPath(filename)
        return path.stem, path.suffix.lstrip(".").lower()

    def extract_trailing_number(self, stem: str) -> int | None:
        """
        Extract the numeric run at the very end of a stem.

        Args:
            stem: Filename without extension

        Returns:
            The trailing number, or None when the stem does not end in a digit

        Example:
            >>> FilenameParser().extract_trailing_number("IMG_0042")
            42
        """
        match = self.TRAILING_NUMBER_PATTERN.match(stem)
        if not match:
            return None
        return int(match.group(2))

    def extract_prefix(self, stem: str) -> str | None:
        """
        Extract everything before the trailing numeric run.

        Args:
            stem: Filename without extension

        Returns:
            The prefix (possibly empty), or None when the stem has no trailing digits

        Example:
            >>> FilenameParser().extract_prefix("PXL_20230725_094339303")
            'PXL_20230725_'
        """
        match = self.TRAILING_NUMBER_PATTERN.match(stem)
        if not match:
            return None
        return match.group(1)

    def are_burst_names(self, stem1: str, stem2: str) -> bool:
        """
        Check if two stems look like consecutive shots of a burst.

        Args:
            stem1: First filename stem
            stem2: Second filename stem

        Returns:
            True if the trailing numbers differ by exactly one, or if both
            stems share the same non-empty prefix before their trailing numbers

        Example:
            >>> parser = FilenameParser()
            >>> parser.are_burst_names("IMG_001", "IMG_002")
            True
            >>> parser.are_burst_names("foo", "bar")
            False
        """
        number1 = self.extract_trailing_number(stem1)
        number2 = self.extract_trailing_number(stem2)
        if number1 is not None and number2 is not None and abs(number1 - number2) == 1:
            return True

        prefix1 = self.extract_prefix(stem1)
        prefix2 = self.extract_prefix(stem2)
        if not prefix1 or not prefix2:
            return False

        return prefix1.lower() == prefix2.lower()
