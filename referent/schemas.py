from pydantic import BaseModel, Field

class ParseRequest(BaseModel):
    url: str

class ParseResponse(BaseModel):
    title: str = Field(description="Headline, or the 'title not found' sentinel")
    date: str = Field(description="Publication date as found on the page, or the 'date not found' sentinel")
    content: str = Field(description="Whitespace-normalized body text, or the 'content not found' sentinel")

class TranslateRequest(BaseModel):
    content: str

class TranslateResponse(BaseModel):
    translation: str
