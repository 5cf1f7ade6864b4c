# src/treelox/evaluator/core.py
import sys
from contextlib import contextmanager

from .. import lox_ast
from ..config import config as default_config
from ..environment import Environment
from ..errors import LoxRuntimeError
from ..memory.heap import Heap
from ..object import NATIVES
from ..safety.memory_safety import MemoryGuard
from .utils import debug_log, logger
from .expressions import ExpressionEvaluatorMixin
from .statements import StatementEvaluatorMixin
from .functions import FunctionEvaluatorMixin

# host frames consumed per interpreted call, with headroom for nested blocks
_FRAMES_PER_CALL = 50


class Evaluator(ExpressionEvaluatorMixin, StatementEvaluatorMixin, FunctionEvaluatorMixin):
    def __init__(self, output=None, heap=None, config=None):
        settings = config or default_config
        self.settings = settings
        self.output = output if output is not None else sys.stdout

        if heap is None:
            heap = Heap(
                initial_threshold=settings.get("gc_initial_threshold"),
                growth_factor=settings.get("gc_growth_factor"),
                stress=settings.get("gc_stress"),
            )
        self.heap = heap
        self.guard = MemoryGuard(
            max_stack_depth=settings.get("max_call_depth"),
            verify_heap=self.heap.stress,
        )

        self.frames = []
        self._saved_environments = []
        self._temp_roots = []
        self._global_environments = []
        self.globals = None
        self.environment = None

        self.heap.set_root_provider(self.roots)
        self.heap.add_listener(self._after_collection)

        self.globals = self.heap.allocate(Environment())
        self._global_environments.append(self.globals)
        self.environment = self.globals
        self._install_natives(self.globals)

        needed = self.guard.max_stack_depth * _FRAMES_PER_CALL + 1000
        if sys.getrecursionlimit() < needed:
            sys.setrecursionlimit(needed)

    def _install_natives(self, environment):
        for native in NATIVES:
            if native.name not in environment:
                environment.define(native.name, native)

    def _after_collection(self, heap, freed):
        self.guard.after_collection(heap)

    # ---- root set ---------------------------------------------------------------

    def roots(self):
        """Every value the collector must treat as live right now."""
        roots = [self.globals, self.environment]
        roots.extend(self._global_environments)
        roots.extend(self._saved_environments)
        roots.extend(frame.callee for frame in self.frames)
        roots.extend(self._temp_roots)
        return [root for root in roots if root is not None]

    @contextmanager
    def temp_roots(self, *values):
        """Keep ``values`` alive across allocations inside the block."""
        mark = len(self._temp_roots)
        self._temp_roots.extend(values)
        try:
            yield
        finally:
            del self._temp_roots[mark:]

    def new_environment(self, enclosing):
        return self.heap.allocate(Environment(enclosing))

    # ---- entry point ------------------------------------------------------------

    def run(self, program, environment=None):
        """
        Execute top-level statements against the globals.

        A given ``environment`` becomes the globals and stays alive for the
        life of the evaluator, so callers can switch back to it later.

        Returns ``None`` on success or the ``LoxRuntimeError`` that aborted
        execution. Internal faults propagate.
        """
        statements = program.statements if isinstance(program, lox_ast.Program) else program

        if environment is not None and environment is not self.globals:
            # a released environment has lost its bindings
            environment.check_live()
            if environment not in self.heap:
                self.heap.allocate(environment)
            if not any(env is environment for env in self._global_environments):
                self._global_environments.append(environment)
            self._install_natives(environment)
            self.globals = environment

        self.environment = self.globals
        debug_log("run", f"{len(statements)} statements", level="normal", settings=self.settings)
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as error:
            logger.debug("execution aborted: %s: %s", error.kind, error.message)
            return error
        finally:
            self.environment = self.globals
            self._saved_environments.clear()
            self._temp_roots.clear()
            self.frames.clear()
            self.guard.reset()
        return None

    def execute(self, stmt):
        return self.eval_node(stmt)

    def evaluate(self, expr):
        return self.eval_node(expr)

    def execute_block(self, statements, environment):
        """Run ``statements`` in ``environment``; the previous one is restored on any exit."""
        previous = self.environment
        self._saved_environments.append(previous)
        self.environment = environment
        try:
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous
            self._saved_environments.pop()

    # ---- dispatch ---------------------------------------------------------------

    def eval_node(self, node):
        node_type = type(node)
        debug_log("eval_node", node_type.__name__, level="verbose", settings=self.settings)

        try:
            # === STATEMENTS ===
            if node_type == lox_ast.ExpressionStatement:
                return self.eval_expression_statement(node)

            elif node_type == lox_ast.PrintStatement:
                return self.eval_print_statement(node)

            elif node_type == lox_ast.VarStatement:
                return self.eval_var_statement(node)

            elif node_type == lox_ast.BlockStatement:
                return self.eval_block_statement(node)

            elif node_type == lox_ast.IfStatement:
                return self.eval_if_statement(node)

            elif node_type == lox_ast.WhileStatement:
                return self.eval_while_statement(node)

            elif node_type == lox_ast.BreakStatement:
                return self.eval_break_statement(node)

            elif node_type == lox_ast.ContinueStatement:
                return self.eval_continue_statement(node)

            elif node_type == lox_ast.FunctionStatement:
                debug_log("  FunctionStatement node", node.name.lexeme, settings=self.settings)
                return self.eval_function_statement(node)

            elif node_type == lox_ast.ReturnStatement:
                return self.eval_return_statement(node)

            elif node_type == lox_ast.ClassStatement:
                debug_log("  ClassStatement node", node.name.lexeme, settings=self.settings)
                return self.eval_class_statement(node)

            # === EXPRESSIONS ===
            elif node_type == lox_ast.Literal:
                return self.eval_literal(node)

            elif node_type == lox_ast.Grouping:
                return self.eval_node(node.expression)

            elif node_type == lox_ast.Variable:
                return self.eval_variable(node)

            elif node_type == lox_ast.Assign:
                return self.eval_assign(node)

            elif node_type == lox_ast.Unary:
                return self.eval_unary(node)

            elif node_type == lox_ast.Binary:
                return self.eval_binary(node)

            elif node_type == lox_ast.Logical:
                return self.eval_logical(node)

            elif node_type == lox_ast.Call:
                debug_log("  Call node", node.callee, settings=self.settings)
                return self.eval_call_expression(node)

            elif node_type == lox_ast.Get:
                return self.eval_get(node)

            elif node_type == lox_ast.Set:
                return self.eval_set(node)

            elif node_type == lox_ast.This:
                return self.eval_this(node)

            elif node_type == lox_ast.Super:
                return self.eval_super(node)

            else:
                raise TypeError(f"Unknown node type: {node_type.__name__}")

        except LoxRuntimeError as error:
            # errors raised below the node level carry no position yet
            if error.line is None and getattr(node, "token", None) is not None:
                error.line = node.token.line
                error.column = node.token.column
            raise
