#!/usr/bin/env python
import asyncio

from termmouse import detect_mouse_support, get_mouse_support_detail

if not asyncio.run(detect_mouse_support(timeout=1.0)):
    print("This terminal does not support mouse input")
else:
    print("This terminal probably supports mouse input")

# Show what environment variables alone suggest
detail = get_mouse_support_detail()
if not detail.is_interactive:
    print("Output is not a terminal")
else:
    print(f"Terminal: {detail.app_id} ({'confident' if detail.confident else detail.generic_id})")
    print(f"Mouse protocol: {detail.protocol}")
    if detail.is_remote_session:
        print("Running within an ssh session")
