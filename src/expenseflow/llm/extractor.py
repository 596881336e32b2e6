"""Model-backed expense extraction with heuristic fallback."""
import json
from typing import List

from pydantic import ValidationError

from .coercer import coerce_json_object
from .models import CATEGORIES, ExpenseGuess, ExpenseRecord
from ..parsing.heuristics import HeuristicExtractor
from ..utils.exceptions import ExtractionUnavailableError
from ..utils.logger import get_logger

logger = get_logger()


class ExpenseExtractor:
    """Turns a text message or receipt photo into an ExpenseGuess.

    The model is asked for a JSON object; when its answer cannot be decoded
    the heuristic extractor runs instead. Without a client (no API key
    configured) text goes straight to the heuristics. A failed model call is not
    recovered from here: ExtractionUnavailableError from the client
    propagates so the caller can tell the user to retry.
    """

    def __init__(self, client, heuristics: HeuristicExtractor = None):
        """
        Initialize extractor.

        Args:
            client: Object exposing ``generate(prompt, image_bytes=None, mime_type=None) -> str``,
                or None to run on heuristics alone
            heuristics: Fallback extractor
        """
        self.client = client
        self.heuristics = heuristics or HeuristicExtractor()
        self.category_list = list(CATEGORIES)

    def extract_text(self, raw_text: str) -> ExpenseGuess:
        """Extract an expense from a chat message."""
        if self.client is None:
            return self.heuristics.extract(raw_text)
        prompt = self._build_text_prompt(raw_text)
        response_text = self.client.generate(prompt)
        return self._interpret(response_text, fallback_text=raw_text)

    def extract_image(self, image_bytes: bytes, mime_type: str) -> ExpenseGuess:
        """Extract an expense from a receipt or price-tag photo."""
        if self.client is None:
            logger.warning("No model client configured, cannot read images")
            return ExpenseGuess()
        prompt = self._build_image_prompt()
        response_text = self.client.generate(prompt, image_bytes=image_bytes, mime_type=mime_type)
        # Whatever the model said is the only transcript we have of the image
        return self._interpret(response_text, fallback_text=response_text)

    def generate_insights(self, records: List[ExpenseRecord]) -> str:
        """Ask the model for a short commentary on a month of expenses."""
        if self.client is None:
            raise ExtractionUnavailableError("No model client configured")
        expense_data = [
            {
                "amount": float(record.amount),
                "category": record.category,
                "description": record.description,
                "date": record.date.isoformat(),
            }
            for record in records
        ]
        prompt = f"""Generate a short monthly expense report based on this data (amounts in Indonesian Rupiah):
{json.dumps(expense_data, ensure_ascii=False, indent=2)}

Provide insights including:
1. Total spending
2. Top spending categories
3. Spending patterns
4. Recommendations for saving
5. Unusual or high expenses

Format the response as a readable report, not JSON."""
        return self.client.generate(prompt).strip()

    def _interpret(self, response_text: str, fallback_text: str) -> ExpenseGuess:
        """Decode the model answer, falling back to heuristics."""
        data = coerce_json_object(response_text)
        if data is not None:
            try:
                guess = ExpenseGuess.model_validate(data)
            except ValidationError as e:
                logger.warning(f"Model response does not match expected schema: {e}")
                guess = None
            if guess is not None and not guess.is_empty():
                return guess
            if guess is not None:
                logger.warning("Model returned an empty expense object, using heuristics")
        else:
            logger.warning("Could not decode model response, using heuristics")

        if not fallback_text or not fallback_text.strip():
            return ExpenseGuess()
        return self.heuristics.extract(fallback_text)

    def _build_text_prompt(self, raw_text: str) -> str:
        """Build extraction prompt for a chat message."""
        return f"""You are an expense parser for chat messages written in Indonesian or English.

Analyze this text and extract expense information. The text might be:
1. A description of an expense (e.g., "Kopi 15rb", "Bought coffee for 25000")
2. A receipt or bill text
3. A simple expense note

Categories (use EXACTLY these names):
{json.dumps(self.category_list, ensure_ascii=False)}

Amounts are in Indonesian Rupiah. Convert shorthand to a plain number:
"15rb" or "15 ribu" = 15000, "2.5k" = 2500, "1,5jt" = 1500000, "Rp 15.000" = 15000.

Text to analyze: "{raw_text}"

Return ONLY a valid JSON object in this format:
{{
  "amount": 15000,
  "description": "brief description of the expense",
  "category": "one of the categories above",
  "date": "YYYY-MM-DD if mentioned, otherwise null",
  "merchant": "store/merchant name if mentioned, otherwise null"
}}

Use null for the amount if no price is mentioned.
Do not include any explanations or markdown formatting, just the JSON object."""

    def _build_image_prompt(self) -> str:
        """Build prompt for receipt photos."""
        return f"""You are an expense parser for photos of receipts, bills and price tags (Indonesian and English).

Analyze this image and extract the expense. Look for:
1. Amount/price; use the grand total on receipts
2. Description of items or services
3. Date (if visible)
4. Merchant/store name
5. Category

Categories (use EXACTLY these names):
{json.dumps(self.category_list, ensure_ascii=False)}

Amounts are in Indonesian Rupiah. "Rp 15.000" means fifteen thousand (the dot
groups thousands, a comma marks decimals). Shorthand such as "15rb", "15 ribu"
or "2.5k" means thousands. Return the amount as a plain number.

Return ONLY a valid JSON object in this format:
{{
  "amount": 15000,
  "description": "brief description of the expense",
  "category": "one of the categories above",
  "date": "YYYY-MM-DD or null",
  "merchant": "store/merchant name or null",
  "raw_text": "all text found in the image"
}}

If no expense information is found, use null for the amount and "Other" as the category.
Do not include any explanations or markdown formatting, just the JSON object."""
