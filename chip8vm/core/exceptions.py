"""Custom exceptions used throughout the chip8vm package."""

from typing import Any, Optional


class Chip8Error(Exception):
    """Base exception for all virtual machine errors.

    All chip8vm-specific exceptions should inherit from this class.
    This allows catching all machine errors with a single except clause.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """

        super().__init__(message)
        self.details = details or {}


class ConfigurationError(Chip8Error):
    """Raised when there's an error in configuration.

    This includes:
    - Invalid configuration value
    - Missing required configuration
    - Configuration validation failures
    """

    def __init__(
        self,
        config_key: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize configuration error.

        Args:
            config_key: The configuration key that caused the error
            message: Description of what's wrong. If omitted, config_key is
                treated as the message and the key defaults to "configuration".
            details: Additional context
        """
        if message is None:
            message = config_key or "Invalid configuration"
            config_key = "configuration"
        if config_key is None:
            config_key = "configuration"

        full_message = f"Configuration error for '{config_key}': {message}"
        super().__init__(message=full_message, details=details)
        self.config_key = config_key


class LoadTooLargeError(Chip8Error):
    """Raised when a ROM does not fit in program memory.

    The load is rejected before any byte of memory is touched.
    """

    def __init__(
        self,
        size: int,
        capacity: int,
        details: Optional[dict[str, Any]] = None,
    ):
        message = f"ROM of {size} bytes exceeds program memory of {capacity} bytes"
        super().__init__(message=message, details=details)
        self.size = size
        self.capacity = capacity


class MachineFault(Chip8Error):
    """Base exception for faults that abort the current instruction.

    The tick driver catches these and reports them as a fault result
    instead of letting them corrupt machine state.
    """

    def __init__(
        self,
        message: str,
        address: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if address is not None:
            details = details or {}
            details["address"] = f"0x{address:03X}"

        super().__init__(message=message, details=details)
        self.address = address


class StackOverflowError(MachineFault):
    """Raised when CALL executes with the stack already full."""

    def __init__(self, depth: int, details: Optional[dict[str, Any]] = None):
        super().__init__(message=f"Stack overflow: depth {depth} reached", details=details)
        self.depth = depth


class StackUnderflowError(MachineFault):
    """Raised when RET executes with an empty stack."""

    def __init__(self, details: Optional[dict[str, Any]] = None):
        super().__init__(message="Stack underflow: return with empty stack", details=details)


class AddressOverflowError(MachineFault):
    """Raised when a memory access falls outside the address space.

    Examples:
    - Sprite rows read past 0xFFF
    - FX55 storing registers past the end of memory
    """

    def __init__(
        self,
        address: int,
        size: int = 1,
        details: Optional[dict[str, Any]] = None,
    ):
        message = f"Out-of-bounds memory access: address=0x{address:03X}, size={size}"
        super().__init__(message=message, address=address, details=details)
        self.size = size


class InvalidProgramCounterError(MachineFault):
    """Raised when execution reaches an address outside program memory."""

    def __init__(self, address: int, details: Optional[dict[str, Any]] = None):
        message = f"Program counter 0x{address:03X} outside program memory"
        super().__init__(message=message, address=address, details=details)


class ProtectedMemoryError(MachineFault):
    """Raised when a write targets the built-in font table."""

    def __init__(self, address: int, details: Optional[dict[str, Any]] = None):
        message = f"Cannot write to font table at 0x{address:03X}"
        super().__init__(message=message, address=address, details=details)
