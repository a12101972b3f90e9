# Services

from .cart_reconciler import CartReconciler
from .checkout import CheckoutProcessor, shipping_cost
from .product_tools import ProductSearchTool, ProductCompareTool
from .response_parser import parse_products
from .llm import AnthropicChatModel, ChatModel, ModelReply, ToolCall
from .assistant import AssistantOrchestrator, AssistantReply

__all__ = [
    "CartReconciler",
    "CheckoutProcessor",
    "shipping_cost",
    "ProductSearchTool",
    "ProductCompareTool",
    "parse_products",
    "AnthropicChatModel",
    "ChatModel",
    "ModelReply",
    "ToolCall",
    "AssistantOrchestrator",
    "AssistantReply",
]
