"""Tests for filename parser module."""

from ..parser import FilenameParser


class TestFilenameParser:
    """Test cases for FilenameParser class."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.parser = FilenameParser()

    def test_split_filename(self) -> None:
        """Test splitting a filename into stem and lower-case extension."""
        assert self.parser.split_filename("IMG_1234.HEIC") == ("IMG_1234", "heic")
        assert self.parser.split_filename("photo.raw") == ("photo", "raw")

    def test_split_filename_multiple_dots(self) -> None:
        """Test that only the last dot separates the extension."""
        assert self.parser.split_filename("holiday.2023.jpg") == ("holiday.2023", "jpg")

    def test_split_filename_without_extension(self) -> None:
        """Test a filename without extension."""
        assert self.parser.split_filename("README") == ("README", "")

    def test_extract_trailing_number(self) -> None:
        """Test extracting the numeric run at the end of a stem."""
        assert self.parser.extract_trailing_number("IMG_001") == 1
        assert self.parser.extract_trailing_number("PXL_20230725_094339303") == 94339303
        assert self.parser.extract_trailing_number("12345") == 12345

    def test_extract_trailing_number_none(self) -> None:
        """Test stems that do not end in a digit."""
        assert self.parser.extract_trailing_number("foo") is None
        assert self.parser.extract_trailing_number("IMG_001a") is None
        assert self.parser.extract_trailing_number("") is None

    def test_trailing_newline_is_not_digit(self) -> None:
        """Test that the numeric run must be the very end of the stem."""
        assert self.parser.extract_trailing_number("IMG_001\n") is None
        assert self.parser.extract_prefix("IMG_001\n") is None
        assert self.parser.are_burst_names("IMG_001\n", "IMG_002") is False

    def test_extract_prefix(self) -> None:
        """Test that the prefix stops at the trailing numeric run."""
        assert self.parser.extract_prefix("IMG_001") == "IMG_"
        assert self.parser.extract_prefix("PXL_20230725_094339303") == "PXL_20230725_"
        assert self.parser.extract_prefix("12345") == ""

    def test_extract_prefix_without_trailing_digits(self) -> None:
        """Test that a stem without trailing digits has no prefix."""
        assert self.parser.extract_prefix("foo") is None

    def test_burst_names_sequential_numbers(self) -> None:
        """Test that consecutive trailing numbers form a burst."""
        assert self.parser.are_burst_names("IMG_001", "IMG_002") is True
        assert self.parser.are_burst_names("DSC09", "shot10") is True

    def test_burst_names_shared_prefix(self) -> None:
        """Test that a shared non-empty prefix forms a burst."""
        assert (
            self.parser.are_burst_names("PXL_20230725_094339303", "PXL_20230725_094340497")
            is True
        )

    def test_burst_names_prefix_case_insensitive(self) -> None:
        """Test that prefixes are compared case-insensitively."""
        assert self.parser.are_burst_names("img_0100", "IMG_0200") is True

    def test_burst_names_no_match(self) -> None:
        """Test stems without shared prefix or numeric tail."""
        assert self.parser.are_burst_names("foo", "bar") is False

    def test_burst_names_different_prefixes(self) -> None:
        """Test different prefixes with non-consecutive numbers."""
        assert self.parser.are_burst_names("IMG_0001", "DSC_0005") is False

    def test_burst_names_empty_prefix(self) -> None:
        """Test that purely numeric stems need consecutive numbers."""
        assert self.parser.are_burst_names("100", "200") is False
        assert self.parser.are_burst_names("100", "101") is True

    def test_burst_names_one_side_without_digits(self) -> None:
        """Test that a stem without trailing digits never matches by prefix."""
        assert self.parser.are_burst_names("IMG_", "IMG_001") is False
