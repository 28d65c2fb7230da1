from loguru import logger

from .engine import HTMLTransformer, transform_html
from .errors import NestingDepthError, NodeValidationError, PluginConfigError, PluginError, TransformError
from .markup import AstNode, parse_markup
from .nodes import (
    Capabilities,
    ElementNode,
    TextNode,
    create_node,
    create_root_node,
    merge_adjacent_text_nodes,
    merge_all_text_nodes,
    replace_node,
    to_dict,
)
from .options import PluginConfig, StyleMode, TransformOptions
from .plugin import Phase, TransformPlugin
from .plugin_info import PluginInfo, get_plugin_info, get_plugin_info_by_name, get_plugins_by_phase
from .resolver import PluginResolver, resolve_plugins
from .style import camel_to_kebab, kebab_to_camel, parse_style_string
from .stylesheet import class_name_for_tag, generate_css, resolve_css_variables, text_class_name_for_tag
from .validate import validate_node, validate_nodes
from .walkers import find_ast_nodes, find_first_ast_node, iter_nodes, walk_ast, walk_ast_until

# Silent unless the application opts in with logger.enable("markupnodes").
logger.disable("markupnodes")

__all__ = [
    "AstNode",
    "Capabilities",
    "ElementNode",
    "HTMLTransformer",
    "NestingDepthError",
    "NodeValidationError",
    "Phase",
    "PluginConfig",
    "PluginConfigError",
    "PluginError",
    "PluginInfo",
    "PluginResolver",
    "StyleMode",
    "TextNode",
    "TransformError",
    "TransformOptions",
    "TransformPlugin",
    "camel_to_kebab",
    "class_name_for_tag",
    "create_node",
    "create_root_node",
    "find_ast_nodes",
    "find_first_ast_node",
    "generate_css",
    "get_plugin_info",
    "get_plugin_info_by_name",
    "get_plugins_by_phase",
    "iter_nodes",
    "kebab_to_camel",
    "merge_adjacent_text_nodes",
    "merge_all_text_nodes",
    "parse_markup",
    "parse_style_string",
    "replace_node",
    "resolve_css_variables",
    "resolve_plugins",
    "text_class_name_for_tag",
    "to_dict",
    "transform_html",
    "validate_node",
    "validate_nodes",
    "walk_ast",
    "walk_ast_until",
]
