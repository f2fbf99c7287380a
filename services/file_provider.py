"""
File Provider Protocol - I/O seam duy nhất của analysis engine.

Engine không bao giờ đọc filesystem trực tiếp: mọi thao tác đọc file,
resolve import, liệt kê files đều đi qua IFileProvider. Adapters:
- LocalFileProvider: filesystem thật (os.walk + pathspec)
- InMemoryFileProvider: virtual FS cho tests / editor buffers

Tất cả paths là POSIX strings đã normalize. canonical_path() cho mỗi file
đúng một key, dùng làm identity của file trong traversal.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class IFileProvider(Protocol):
    """Protocol cho file access."""

    def read_file(self, path: str) -> str:
        """
        Đọc nội dung file.

        Raises:
            SourceFileNotFoundError: Path không tồn tại / không đọc được
        """
        ...

    def resolve_import(self, from_path: str, specifier: str) -> Optional[str]:
        """
        Resolve relative import specifier thành path của file đích.

        Chỉ hỗ trợ relative specifiers (`./x`, `../x`, Python `.x`, `..x`).

        Returns:
            Path đã normalize, hoặc None nếu không resolve được
        """
        ...

    def list_files(self, pattern: str) -> list[str]:
        """Liệt kê files match glob (tương đối root, hỗ trợ `**` và `{a,b}`)."""
        ...

    def exists(self, path: str) -> bool:
        ...

    def relative_path(self, path: str) -> str:
        """Path tương đối root của provider (dùng để match exclude patterns)."""
        ...

    def canonical_path(self, path: str) -> str:
        """
        Dạng chuẩn của path: cùng một file luôn cho cùng một string,
        dù input là relative hay absolute.
        """
        ...
