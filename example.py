"""Example usage of the semantic diff engine."""

from semantic_diff import SemanticDiffEngine

# Two versions of a small TypeScript module
BEFORE = """import { db } from './db';

export interface User {
  id: number;
  name: string;
}

export function getUser(id: number): User {
  return db.query(id);
}

export function deleteUser(id: number) {
  db.remove(id);
}
"""

AFTER = """import { db } from './db';

export interface User {
  id: number;
  name: string;
  email?: string;
}

export function getUser(id: number): User {
  return db.query(id);
}

export const DEFAULT_PAGE_SIZE = 50;
"""

EXAMPLE_DIFF = """diff --git a/users.ts b/users.ts
index 1234567..abcdefg 100644
--- a/users.ts
+++ b/users.ts
@@ -3,4 +3,5 @@ import { db } from './db';
 export interface User {
   id: number;
   name: string;
+  email?: string;
 }
@@ -11,4 +12,2 @@ export function getUser(id: number): User {
 
-export function deleteUser(id: number) {
-  db.remove(id);
-}
+export const DEFAULT_PAGE_SIZE = 50;
"""


def main():
    """Run example."""
    print("=" * 80)
    print("Semantic Diff Engine - Example Usage")
    print("=" * 80)
    print()

    engine = SemanticDiffEngine()

    result = engine.semantic_diff(BEFORE, AFTER, 'ts', file_path='users.ts')
    print(f"Found {len(result.changes)} symbol-level changes:")
    for change in result.changes:
        print(f"  {change.type:<7} {change.symbol_name:<20} {change.detail}")
    print()

    by_hunk = engine.split_patch(EXAMPLE_DIFF, 'ts')
    by_symbol = engine.split_patch_by_symbol(EXAMPLE_DIFF, BEFORE, AFTER, 'ts', file_path='users.ts')
    print(f"Hunk mode: {len(by_hunk.chunks)} fragments")
    print(f"Symbol mode: {len(by_symbol.chunks)} fragments")
    print()

    for index, chunk in enumerate(by_symbol.chunks, 1):
        print(f"--- fragment {index} ---")
        print(chunk)

    print("=" * 80)
    print("Example complete!")
    print("=" * 80)


if __name__ == "__main__":
    main()
