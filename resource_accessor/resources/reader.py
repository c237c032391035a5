"""Size-limited reading of resolved resource streams."""

import hashlib
from typing import BinaryIO


class ResourceReader:
    """Reads caller-owned resource streams with a size limit.

    The reader never closes the streams it is given; whoever obtained them
    from ResourceResolver.open_all() stays responsible for that.
    """

    def __init__(self, max_bytes: int = 200_000):
        """Initialize with the default read limit.

        Args:
            max_bytes: Maximum number of bytes returned by a single read
        """
        if max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {max_bytes}")
        self.max_bytes = max_bytes

    def read_binary(
        self,
        stream: BinaryIO,
        max_bytes: int | None = None
    ) -> tuple[bytes, bool]:
        """Read bytes from stream.

        Args:
            stream: Readable binary stream
            max_bytes: Optional override for the read limit

        Returns:
            Tuple of (content, truncated) where truncated is True if the
            stream held more than the limit
        """
        if max_bytes is None:
            max_bytes = self.max_bytes

        content = stream.read(max_bytes)

        # Try to read one more byte to detect truncation
        truncated = bool(stream.read(1))

        return content, truncated

    def read_text(
        self,
        stream: BinaryIO,
        encoding: str = "utf-8",
        max_bytes: int | None = None
    ) -> tuple[str, bool]:
        """Read stream and decode it as text.

        Undecodable bytes are replaced rather than raising, and a multi-byte
        character cut by the limit decodes to a replacement character.

        Returns:
            Tuple of (content, truncated)
        """
        content, truncated = self.read_binary(stream, max_bytes)
        return content.decode(encoding, errors="replace"), truncated

    def compute_sha256(self, content: str | bytes) -> str:
        """Compute SHA256 hash of content.

        Args:
            content: String or bytes to hash

        Returns:
            Hexadecimal SHA256 hash string
        """
        if isinstance(content, str):
            content = content.encode('utf-8')
        return hashlib.sha256(content).hexdigest()
