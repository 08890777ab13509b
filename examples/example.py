import threading

from chipvm import create_state, load_program, run_frame, InputGateway, framebuffer_snapshot

# Wait for a key, draw its hex glyph at (8, 8), then loop forever
PROGRAM = bytes([
    0xF0, 0x0A,  # V0 = next key press
    0xF0, 0x29,  # I = glyph for V0
    0x61, 0x08,  # V1 = 8
    0xD1, 0x15,  # draw 8x5 at (V1, V1)
    0x12, 0x08,  # jump to self
])


def print_framebuffer(framebuffer):
    rows = framebuffer.reshape(32, 64)
    for row in rows[:16]:
        print("".join("#" if cell else "." for cell in row[:24]))


if __name__ == "__main__":
    state = load_program(create_state(with_font=True), PROGRAM)
    gateway = InputGateway()

    # Simulate a key press arriving from an input thread
    threading.Timer(0.1, gateway.press, args=(0xA,)).start()

    for frame in range(30):
        state = run_frame(state, gateway, instructions_per_frame=10)
        if state.is_waiting:
            gateway.block_until_next_keypress(timeout=1.0)

    print(f"pc=0x{int(state.pc):03X} V0={int(state.V[0]):X}")
    print_framebuffer(framebuffer_snapshot(state))
