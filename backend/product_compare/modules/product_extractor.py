import logging

from langchain_core.prompts import ChatPromptTemplate

from product_compare.core.config import get_settings
from product_compare.core.llm_factory import get_shared_llm
from product_compare.models.product import ProductInfo

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """The language model could not turn markdown into a ProductInfo."""


EXTRACTION_PROMPT = ChatPromptTemplate.from_messages([
    ("system",
     """You are a product information extraction assistant.
Extract structured product information from the provided markdown text.

Fill the following fields:
- productTitle: the title of the product
- description: a concise description of the product
- price: the price of the product (include currency symbol)
- features: the list of product features
- productVariants: variants with a name (e.g. 'Color', 'Size'), their options, and a price if different from the base price (include currency symbol)
- warranty: warranty information if available

If any field is not found in the text, use an empty string for string fields,
an empty array for array fields, or omit optional fields.
Do not invent information that is not in the text."""
    ),
    ("user", "{markdown}"),
])


async def extract_product_info(markdown: str) -> ProductInfo:
    """
    Extract structured product information from markdown text.

    Raises:
        ExtractionError: If the text is empty or the model call fails.
    """
    if not markdown or not markdown.strip():
        raise ExtractionError("Cannot extract product information from empty text")

    settings = get_settings()
    text = markdown[:settings.extraction_max_chars]

    try:
        llm = get_shared_llm().with_structured_output(ProductInfo)
        messages = EXTRACTION_PROMPT.format_messages(markdown=text)
        product = await llm.ainvoke(messages)
    except Exception as e:
        logger.error("extract_product_info failed: %s", e, exc_info=True)
        raise ExtractionError("Failed to extract product information from the provided text") from e

    if not isinstance(product, ProductInfo):
        # some providers hand back a plain dict
        try:
            product = ProductInfo.model_validate(product)
        except Exception as e:
            raise ExtractionError("Failed to extract product information from the provided text") from e

    logger.info("Extracted product '%s' (%d features)", product.product_title[:80], len(product.features))
    return product
