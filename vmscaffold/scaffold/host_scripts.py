"""Host-side helper scripts for generated projects."""

from typing import List


class HostScriptGenerator:
    """Generates the start/stop/guest-additions scripts at the project root.

    Each script comes in a POSIX shell flavor (.sh) and a Windows flavor (.bat).
    """

    def __init__(self, machine_dirs: List[str]):
        # Relative to the project root, e.g. "machines/demo-web"
        self.machine_dirs = machine_dirs

    def scripts(self) -> dict:
        """Return file name -> content for every host script."""
        return {
            "start-vms.sh": self.generate_start_script(),
            "start-vms.bat": self.generate_start_batch(),
            "stop-vms.sh": self.generate_stop_script(),
            "stop-vms.bat": self.generate_stop_batch(),
            "add-vbox-guest-additions.sh": self.generate_guest_additions_script(),
            "add-vbox-guest-additions.bat": self.generate_guest_additions_batch(),
        }

    def generate_start_script(self) -> str:
        """Generate script that boots every machine in order."""
        return self._shell_loop("up", "Starting", self.machine_dirs)

    def generate_stop_script(self) -> str:
        """Generate script that halts every machine, last one first."""
        return self._shell_loop("halt", "Stopping", list(reversed(self.machine_dirs)))

    def generate_start_batch(self) -> str:
        return self._batch_loop("up", "Starting", self.machine_dirs)

    def generate_stop_batch(self) -> str:
        return self._batch_loop("halt", "Stopping", list(reversed(self.machine_dirs)))

    def generate_guest_additions_script(self) -> str:
        return """#!/usr/bin/env bash
set -e

echo "Installing vagrant-vbguest plugin..."
vagrant plugin install vagrant-vbguest

echo "Done. Guest additions are updated on the next 'vagrant up'."
"""

    def generate_guest_additions_batch(self) -> str:
        return """@echo off
echo Installing vagrant-vbguest plugin...
vagrant plugin install vagrant-vbguest || exit /b 1
echo Done. Guest additions are updated on the next 'vagrant up'.
"""

    def _shell_loop(self, command: str, verb: str, machine_dirs: List[str]) -> str:
        lines = [
            "#!/usr/bin/env bash",
            "set -e",
            "",
            'cd "$(dirname "$0")"',
            "",
        ]
        for machine_dir in machine_dirs:
            lines.append(f'echo "{verb} {machine_dir}..."')
            lines.append(f'(cd "{machine_dir}" && vagrant {command})')
        return "\n".join(lines) + "\n"

    def _batch_loop(self, command: str, verb: str, machine_dirs: List[str]) -> str:
        lines = [
            "@echo off",
            'cd /d "%~dp0"',
            "",
        ]
        for machine_dir in machine_dirs:
            win_dir = machine_dir.replace("/", "\\")
            lines.append(f"echo {verb} {win_dir}...")
            lines.append(f'pushd "{win_dir}"')
            lines.append(f"vagrant {command} || (popd & exit /b 1)")
            lines.append("popd")
        return "\r\n".join(lines) + "\r\n"
