from tools.registry import ToolRegistry, build_registry_from_tools
from tools.spec import Tool
from tools_directory_operations import directory_operations_tool_def, directory_operations_impl
from tools_execute_command import execute_command_tool_def, execute_command_impl
from tools_execute_script import execute_script_tool_def, execute_script_impl
from tools_file_operations import file_operations_tool_def, file_operations_impl
from tools_file_read import file_read_tool_def, file_read_impl
from tools_file_write import file_write_tool_def, file_write_impl
from tools_processes import (
    kill_process_impl,
    kill_process_tool_def,
    list_processes_impl,
    list_processes_tool_def,
)
from tools_system_info import system_info_tool_def, system_info_impl


def build_default_tools() -> list[Tool]:
    return [
        Tool(**execute_command_tool_def(), fn=execute_command_impl, capabilities={"exec_shell"}),
        Tool(**execute_script_tool_def(), fn=execute_script_impl, capabilities={"exec_shell"}),
        Tool(**system_info_tool_def(), fn=system_info_impl, capabilities={"system"}),
        Tool(**list_processes_tool_def(), fn=list_processes_impl, capabilities={"system"}),
        Tool(**kill_process_tool_def(), fn=kill_process_impl, capabilities={"system"}),
        Tool(**file_read_tool_def(), fn=file_read_impl, capabilities={"read_fs"}),
        Tool(**file_write_tool_def(), fn=file_write_impl, capabilities={"write_fs"}),
        Tool(**file_operations_tool_def(), fn=file_operations_impl, capabilities={"write_fs"}),
        Tool(
            **directory_operations_tool_def(),
            fn=directory_operations_impl,
            capabilities={"read_fs", "write_fs"},
        ),
    ]


def build_default_registry() -> ToolRegistry:
    """Registry preloaded with every built-in tool; ``reset()`` restores that set."""
    return build_registry_from_tools(build_default_tools())


def main() -> None:
    from cli import main as cli_main

    raise SystemExit(cli_main())


if __name__ == "__main__":
    main()
