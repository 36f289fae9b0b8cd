"""
System prompts and prompt templates for the completion provider.

Three conversations are sent to the model: general chat, the retail
assistant answering from retrieved product JSON, and the session name
summariser.

Dependencies: langchain_core.prompts
System role: Prompt templates for chat, RAG and summarisation
"""

from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

GENERAL_SYSTEM_PROMPT = """You are an AI assistant that helps people find information.
Provide concise answers that are polite and professional."""

RETAIL_SYSTEM_PROMPT = """You are an intelligent assistant for the Cosmic Works Bike Company.
You are designed to provide helpful answers to user questions about
bike products and accessories provided in JSON format below.

Instructions:
- Only answer questions related to the information provided below.
- Don't reference any product data not provided below.
- If you're unsure of an answer, you can say "I don't know" or "I'm not sure" and recommend users search themselves.

Text of relevant information:
"""

SUMMARIZE_SYSTEM_PROMPT = """Summarize this text. One to three words maximum length.
Plain text only. No punctuation, markup or tags."""

GENERAL_CHAT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", GENERAL_SYSTEM_PROMPT),
    MessagesPlaceholder("history"),
])

# Product JSON is passed as a variable so its braces are never parsed as placeholders
RAG_CHAT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", RETAIL_SYSTEM_PROMPT + "{products}"),
    MessagesPlaceholder("history"),
])

SUMMARIZE_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SUMMARIZE_SYSTEM_PROMPT),
    ("human", "{conversation}"),
])
