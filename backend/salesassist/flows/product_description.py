from __future__ import annotations

from typing import Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, field_validator

from ..errors import EmptyResultError
from ..gemini_client import GeminiClient
from .registry import define_flow


class ProductDescriptionInput(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	product_name: str = Field(alias="productName", min_length=1, description="Display name of the product.")
	brand_name: Optional[str] = Field(default=None, alias="brandName", description="Official brand name associated with the product.")
	brand_url: Optional[AnyHttpUrl] = Field(default=None, alias="brandUrl", description="Official URL for the brand or product.")

	@field_validator("product_name")
	@classmethod
	def _product_name_not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("productName must not be blank")
		return value


class ProductDescriptionOutput(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	description: str = Field(description="A concise, compelling one-sentence summary suitable for a telesales application.")


def _build_description_prompt(req: ProductDescriptionInput) -> str:
	lines = [
		"You are an expert product marketer. Generate a concise, compelling one-sentence description for a product.",
		"The description is an internal reference for telesales agents. Focus on the product's core value or purpose.",
		"",
		f'Product Name: "{req.product_name}"',
	]
	if req.brand_name:
		lines.append(f'Brand Name: "{req.brand_name}"')
	if req.brand_url:
		lines.append(f"Brand URL: {req.brand_url}")
	lines += [
		"",
		"Use what you know about the brand and URL as the primary source. If you lack information, write a plausible description from the product and brand name alone.",
		"Return ONLY a JSON object with exactly one key: description (string).",
	]
	return "\n".join(lines)


@define_flow("generateProductDescriptionFlow", input_model=ProductDescriptionInput, output_model=ProductDescriptionOutput)
async def generate_product_description(
	input: ProductDescriptionInput,
	client: GeminiClient,
	*,
	model: Optional[str] = None,
) -> ProductDescriptionOutput:
	data = await client.generate_json(_build_description_prompt(input), model=model, temperature=0.7)
	description = str(data.get("description") or "").strip()
	if not description:
		raise EmptyResultError("AI failed to generate a description.", provider="gemini")
	return ProductDescriptionOutput(description=description)
