"""
Combined PDF assembly for captured pages
"""

from pathlib import Path
from typing import Sequence

from PIL import Image
from reportlab.pdfgen import canvas

POINTS_PER_INCH = 72


def assemble_pdf(image_paths: Sequence[Path], output_path, dpi=150) -> Path:
    """
    Write one PDF page per image, each page sized to its image

    Args:
        image_paths: Page images in order
        output_path: Destination PDF file
        dpi: Resolution used to convert pixels to page size

    Returns:
        Path: The written PDF
    """
    if not image_paths:
        raise ValueError("Cannot build a PDF without pages")

    output_path = Path(output_path)
    scale = POINTS_PER_INCH / dpi
    pdf = canvas.Canvas(str(output_path))

    for path in image_paths:
        with Image.open(path) as image:
            width, height = image.size
        page_size = (width * scale, height * scale)
        pdf.setPageSize(page_size)
        pdf.drawImage(str(path), 0, 0, width=page_size[0], height=page_size[1])
        pdf.showPage()

    pdf.save()
    return output_path
