#!/usr/bin/env python3
"""
StackSim Simulator Demo
=======================

This script demonstrates how to use the simulator to:
1. Load a program and pick a stack size
2. Step through it one micro-step at a time
3. Step back and forward through the recorded history
4. Inspect the stack window
5. Run to completion

Usage:
    python examples/simulator_demo.py

Copyright (c) 2026 StackSim Contributors
"""

from pathlib import Path

from stacksim import Simulator, SimulatorConfig, stack_window, format_word


def main():
    # ==========================================================================
    # 1. Create a simulator and load a program
    # ==========================================================================
    # The stack size is also the initial SP: 100H, 200H and 400H are typical.

    source = (Path(__file__).parent / "lab_demo.asm").read_text()
    sim = Simulator(SimulatorConfig(stack_size=0x100), source)

    print(f"Loaded {len(sim.instructions)} instructions")
    print(f"  {sim.state.last_action}, SP={sim.state.sp:04X}H")

    # ==========================================================================
    # 2. Step through the first PUSH
    # ==========================================================================
    # PUSH takes two micro-steps: the first only moves SP, the second stores.

    for _ in range(3):
        state = sim.step()
        print(f"  line {sim.active_line + 1}: {state.last_action}")

    # ==========================================================================
    # 3. Go back and replay
    # ==========================================================================
    # Stepping back never discards anything; stepping forward again replays
    # the same states.

    sim.step_back()
    print(f"\nBack to step {sim.history.index}: phase {sim.state.phase.value}")
    sim.step()
    print(f"Forward to step {sim.history.index}: {sim.state.last_action}")

    # ==========================================================================
    # 4. Run to the end and show the stack
    # ==========================================================================

    event = sim.run()
    print(f"\n{event}")
    print("  " + "  ".join(f"{name}={value:04X}" for name, value in sim.registers.items()))

    for cell in stack_window(sim.state, below=8):
        value = format_word(cell.value if cell.written else None)
        marker = "<- SP" if cell.is_top else ""
        print(f"  {cell.address:04X}  {value}  {marker}")


if __name__ == "__main__":
    main()
