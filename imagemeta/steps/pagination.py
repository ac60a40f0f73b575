"""Creation of the physical pagination from the image list."""

from pathlib import Path
from typing import Sequence

from imagemeta.logging import get_logger
from imagemeta.model.document import DigitalDocument, Metadata
from imagemeta.model.prefs import Prefs

PAGE_TYPE = "page"
PHYSICAL_PAGE_NUMBER = "physPageNumber"
LOGICAL_PAGE_NUMBER = "logicalPageNumber"
UNCOUNTED = "uncounted"
LOGICAL_PHYSICAL = "logical_physical"

logger = get_logger("pagination")


def synchronize_pagination(document: DigitalDocument, prefs: Prefs, images: Sequence[Path]) -> int:
    """Create one page per image if the physical structure has no pages yet.

    Existing pages are never reconciled with the images, even when the counts
    differ. Types are resolved before the document is touched, so an unknown
    type leaves it unchanged.

    Args:
        document: Document whose physical structure is filled.
        prefs: Ruleset resolving the page and page number types.
        images: Images in page order.

    Returns:
        Number of pages created.
    """
    existing = document.physical.get_all_children()
    if existing:
        if len(existing) != len(images):
            logger.warning(
                f"Document has {len(existing)} pages but {len(images)} images were found, pagination left unchanged"
            )
        return 0

    page_type = prefs.get_docstruct_type_by_name(PAGE_TYPE)
    physical_number_type = prefs.get_metadata_type_by_name(PHYSICAL_PAGE_NUMBER)
    logical_number_type = prefs.get_metadata_type_by_name(LOGICAL_PAGE_NUMBER)

    for order, image in enumerate(images, start=1):
        page = document.create_docstruct(page_type)
        page.image_name = str(image)
        page.add_metadata(Metadata(physical_number_type, str(order)))
        page.add_metadata(Metadata(logical_number_type, UNCOUNTED))
        document.physical.add_child(page)
        document.logical.add_reference_to(page, LOGICAL_PHYSICAL)

    logger.info(f"Created {len(images)} pages")
    return len(images)
